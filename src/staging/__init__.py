"""Collaborators for the staging sandbox: directories, manifest, subprocesses."""

from .command import Command
from .manifest import Dependency, Manifest
from .stager import Stager

__all__ = ["Command", "Dependency", "Manifest", "Stager"]
