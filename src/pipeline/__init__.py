"""Supply and finalize orchestration."""

from .finalize import Finalizer
from .supply import Supplier

__all__ = ["Finalizer", "Supplier"]
