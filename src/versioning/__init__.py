"""PHP version resolution."""

from .models import ResolvedVersion, VersionCandidate, VersionRequest
from .parser import build_version_request, expand_alias, translate_constraint, version_line
from .resolver import PhpVersionResolver, find_matching_version, resolve

__all__ = [
    "ResolvedVersion",
    "VersionCandidate",
    "VersionRequest",
    "build_version_request",
    "expand_alias",
    "translate_constraint",
    "version_line",
    "PhpVersionResolver",
    "find_matching_version",
    "resolve",
]
