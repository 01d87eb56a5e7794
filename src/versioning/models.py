"""Data models for PHP version resolution."""

from dataclasses import dataclass, field
from typing import List, Optional

from constants import VersionSource


@dataclass(frozen=True)
class VersionCandidate:
    """A raw version declaration and where it came from."""
    source: VersionSource
    raw: str


@dataclass
class VersionRequest:
    """Ordered version declarations, highest precedence first."""
    candidates: List[VersionCandidate] = field(default_factory=list)

    @property
    def winner(self) -> Optional[VersionCandidate]:
        return self.candidates[0] if self.candidates else None


@dataclass(frozen=True)
class ResolvedVersion:
    """Resolution outcome; read-only for the rest of the run."""
    version: str
    source: VersionSource
    requested: Optional[str]
    defaulted: bool
