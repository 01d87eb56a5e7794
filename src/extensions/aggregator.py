"""Merge extension requests from defaults, options.json and composer.json.

Every source is turned into ExtensionDelta values and ``fold`` combines
them by tier, so the result does not depend on the order deltas are passed
in. Within a tier REPLACE deltas apply before UNION deltas.

options.json lists replace the defaults while composer.json ``ext-*``
requirements are always added on top, so the deprecated options.json list
never drops a declared composer requirement.
"""

import logging
from typing import Iterable, List, Mapping, Optional, Sequence

from constants import Constants
from .models import ExtensionDelta, ExtensionKind, ExtensionSet, MergeMode, Tier

logger = logging.getLogger(__name__)


def default_deltas() -> List[ExtensionDelta]:
    return [
        ExtensionDelta(Tier.DEFAULTS, ExtensionKind.PHP, MergeMode.REPLACE,
                       frozenset(Constants.DEFAULT_PHP_EXTENSIONS)),
        ExtensionDelta(Tier.DEFAULTS, ExtensionKind.ZEND, MergeMode.REPLACE,
                       frozenset(Constants.DEFAULT_ZEND_EXTENSIONS)),
    ]


def options_deltas(php_extensions: Optional[Sequence[str]],
                   zend_extensions: Optional[Sequence[str]]) -> List[ExtensionDelta]:
    """Deltas for the legacy PHP_EXTENSIONS / ZEND_EXTENSIONS arrays."""
    deltas = []
    if php_extensions is not None:
        logger.warning("PHP_EXTENSIONS in options.json is deprecated.")
        deltas.append(ExtensionDelta(Tier.OPTIONS_FILE, ExtensionKind.PHP, MergeMode.REPLACE,
                                     frozenset(php_extensions)))
        logger.debug("Found php extensions in options.json: %s", sorted(php_extensions))
    if zend_extensions is not None:
        deltas.append(ExtensionDelta(Tier.OPTIONS_FILE, ExtensionKind.ZEND, MergeMode.REPLACE,
                                     frozenset(zend_extensions)))
        logger.debug("Found zend extensions in options.json: %s", sorted(zend_extensions))
    return deltas


def extensions_from_requires(require_keys: Iterable[str]) -> frozenset:
    """Extension names implied by composer.json ``require`` keys.

    ``ext-<name>`` yields ``<name>``; any ``ext-pdo_<driver>`` also pulls in ``pdo``.
    """
    names = set()
    for key in require_keys:
        if key.startswith(Constants.COMPOSER_EXT_PREFIX):
            names.add(key[len(Constants.COMPOSER_EXT_PREFIX):])
        if key.startswith(Constants.COMPOSER_PDO_PREFIX):
            names.add(Constants.PDO_EXTENSION)
    return frozenset(names)


def composer_deltas(requires: Mapping[str, object]) -> List[ExtensionDelta]:
    names = extensions_from_requires(requires.keys())
    if not names:
        return []
    logger.debug("Found php extensions in composer.json: %s", sorted(names))
    return [ExtensionDelta(Tier.COMPOSER, ExtensionKind.PHP, MergeMode.UNION, names)]


def _apply(current: frozenset, delta: ExtensionDelta) -> frozenset:
    if delta.mode == MergeMode.REPLACE:
        return delta.names
    return current | delta.names


def fold(deltas: Iterable[ExtensionDelta]) -> ExtensionSet:
    """Combine deltas into an ExtensionSet, lowest tier first."""
    ordered = sorted(deltas, key=lambda d: (d.tier, d.mode != MergeMode.REPLACE, sorted(d.names)))
    php: frozenset = frozenset()
    zend: frozenset = frozenset()
    for delta in ordered:
        if delta.kind == ExtensionKind.PHP:
            php = _apply(php, delta)
        else:
            zend = _apply(zend, delta)
    return ExtensionSet(php=php, zend=zend)


def aggregate(php_extensions: Optional[Sequence[str]],
              zend_extensions: Optional[Sequence[str]],
              requires: Mapping[str, object]) -> ExtensionSet:
    """Resolve the extension set for one staging run."""
    return fold(default_deltas() + options_deltas(php_extensions, zend_extensions) + composer_deltas(requires))
