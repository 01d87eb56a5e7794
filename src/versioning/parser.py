"""Normalization of raw PHP version declarations."""

import logging
import re
from typing import Optional

from constants import Constants, VersionSource
from .models import VersionCandidate, VersionRequest

logger = logging.getLogger(__name__)

_ALIAS_RE = re.compile(Constants.PHP_ALIAS_PATTERN)


def expand_alias(raw: str) -> str:
    """Expand ``PHP_72_LATEST`` to ``7.2.x``; any other string is returned unchanged."""
    m = _ALIAS_RE.fullmatch(raw.strip())
    if m:
        return f"{m.group(1)}.{m.group(2)}.x"
    return raw


def translate_constraint(raw: str) -> str:
    """Rewrite a composer.json ``require.php`` value into resolver syntax.

    ``>=`` is read as the compatible-with operator (``>=7.1`` selects the
    7.1 line); commas joining composer constraints become spaces and
    whitespace after an operator is dropped (``>= 7.1`` is ``~7.1``).
    """
    s = raw.strip().replace(">=", "~")
    s = re.sub(r"([<>=~^!]+)\s+", r"\1", s)
    s = re.sub(r"\s*,\s*", " ", s)
    return s


def version_line(version: str) -> str:
    """Replace the most specific component with ``x``: ``7.2.14`` -> ``7.2.x``."""
    parts = version.split(".")
    parts[-1] = "x"
    return ".".join(parts)


def build_version_request(options_version: Optional[str], composer_constraint: Optional[str]) -> VersionRequest:
    """Order the declared versions by precedence.

    composer.json wins over options.json; when both are set the user is
    warned which one is used.
    """
    candidates = []
    if composer_constraint:
        logger.debug("PHP Version from composer.json: %s", composer_constraint)
        if options_version:
            logger.warning("A version of PHP has been specified in both `composer.json` and `./bp-config/options.json`.")
            logger.warning("The version defined in `composer.json` will be used.")
        candidates.append(VersionCandidate(VersionSource.COMPOSER, translate_constraint(composer_constraint)))
    if options_version:
        logger.debug("PHP Version from options.json: %s", options_version)
        expanded = expand_alias(options_version)
        if expanded != options_version:
            logger.debug("PHP Version interpolated: %s", expanded)
        candidates.append(VersionCandidate(VersionSource.OPTIONS_FILE, expanded))
    return VersionRequest(candidates=candidates)
