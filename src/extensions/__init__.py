"""Extension set aggregation."""

from .aggregator import aggregate, fold
from .models import ExtensionDelta, ExtensionKind, ExtensionSet, MergeMode, Tier

__all__ = ["aggregate", "fold", "ExtensionDelta", "ExtensionKind", "ExtensionSet", "MergeMode", "Tier"]
