"""PHP version resolver using semantic versioning."""

import logging
import re
from typing import Callable, List, Optional, Sequence

import semantic_version

from constants import VersionSource
from .models import ResolvedVersion, VersionRequest

logger = logging.getLogger(__name__)

UNAVAILABLE_WARNING = (
    "PHP version %s not available, using default version.\n"
    "            In future versions of the buildpack, specifying a non-existent PHP version will cause staging to fail.\n"
    "            See: http://docs.cloudfoundry.org/buildpacks/php/gsg-php-composer.html"
)


def _normalize_spec(spec_str: str) -> str:
    """Normalize hyphen and x-ranges into SimpleSpec-compatible form."""
    s = spec_str.strip()

    # Hyphen ranges: "7.1.0 - 7.3.5" => ">=7.1.0,<=7.3.5"
    m = re.match(r'^\s*([0-9A-Za-z\.\-\+]+)\s+-\s+([0-9A-Za-z\.\-\+]+)\s*$', s)
    if m:
        return f">={m.group(1)},<={m.group(2)}"

    s2 = s.replace('*', 'x').lower()
    m = re.match(r'^\s*(\d+)\.(\d+)\.x\s*$', s2)
    if m:
        major, minor = int(m.group(1)), int(m.group(2))
        return f">={major}.{minor}.0,<{major}.{minor + 1}.0"

    m = re.match(r'^\s*(\d+)(?:\.x)?\s*$', s2)
    if m:
        major = int(m.group(1))
        return f">={major}.0.0,<{major + 1}.0.0"

    return s.replace(" ", ",")


def _parse_spec(spec_str: str):
    """Prefer NpmSpec (understands ~, ^, x-ranges, ||); fall back to SimpleSpec."""
    try:
        return semantic_version.NpmSpec(spec_str)
    except ValueError:
        return semantic_version.SimpleSpec(_normalize_spec(spec_str))


def find_matching_version(spec_str: str, candidates: Sequence[str]) -> Optional[str]:
    """Return the highest catalog entry satisfying ``spec_str``.

    Returns None when nothing matches. Raises ValueError when the
    constraint cannot be parsed at all.
    """
    spec = _parse_spec(spec_str)

    matching = []
    for raw in candidates:
        try:
            ver = semantic_version.Version(raw)
        except ValueError:
            continue  # Skip entries that are not semantic versions
        if ver.prerelease:
            continue
        if spec.match(ver):
            matching.append((ver, raw))

    if not matching:
        return None
    matching.sort(key=lambda item: item[0], reverse=True)
    return matching[0][1]


class PhpVersionResolver:
    """Turns a VersionRequest into a concrete catalog version.

    Resolution is lenient: an unknown or unparseable constraint falls back to
    the catalog default with a warning. Only a failing default lookup is
    fatal, and that error propagates unchanged.
    """

    def __init__(self, catalog: Sequence[str], default: Callable[[], str]):
        self.catalog: List[str] = list(catalog)
        self.default = default

    def resolve(self, request: VersionRequest) -> ResolvedVersion:
        winner = request.winner
        if winner is not None:
            try:
                found = find_matching_version(winner.raw, self.catalog)
            except ValueError as exc:
                logger.debug("Invalid version constraint %r: %s", winner.raw, exc)
                found = None
            if found is not None:
                logger.debug("PHP Version interpolated: %s", found)
                return ResolvedVersion(version=found, source=winner.source, requested=winner.raw, defaulted=False)
            logger.warning(UNAVAILABLE_WARNING, winner.raw)

        version = self.default()
        logger.debug("PHP Version Default: %s", version)
        return ResolvedVersion(
            version=version,
            source=winner.source if winner is not None else VersionSource.NONE,
            requested=winner.raw if winner is not None else None,
            defaulted=True,
        )


def resolve(request: VersionRequest, catalog: Sequence[str], default: Callable[[], str]) -> ResolvedVersion:
    """Convenience wrapper around PhpVersionResolver."""
    return PhpVersionResolver(catalog, default).resolve(request)
