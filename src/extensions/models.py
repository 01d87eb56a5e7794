"""Data models for extension aggregation."""

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import FrozenSet, Iterable, Optional


class ExtensionKind(Enum):
    """Whether an extension loads as ``extension=`` or ``zend_extension=``."""
    PHP = "php"
    ZEND = "zend"


class Tier(IntEnum):
    """Provenance tiers, applied lowest value first."""
    DEFAULTS = 0
    OPTIONS_FILE = 1
    COMPOSER = 2


class MergeMode(Enum):
    """How a delta combines with what lower tiers produced."""
    REPLACE = "replace"
    UNION = "union"


@dataclass(frozen=True)
class ExtensionDelta:
    """One source's contribution to a single extension category."""
    tier: Tier
    kind: ExtensionKind
    mode: MergeMode
    names: FrozenSet[str]


@dataclass(frozen=True)
class ExtensionSet:
    """Resolved extensions, kept per category and free of duplicates."""
    php: FrozenSet[str] = frozenset()
    zend: FrozenSet[str] = frozenset()

    def php_directives(self, extra: Optional[Iterable[str]] = None) -> str:
        names = self.php | frozenset(extra or ())
        return "".join(f"extension={name}.so\n" for name in sorted(names))

    def zend_directives(self) -> str:
        return "".join(f"zend_extension={name}\n" for name in sorted(self.zend))
