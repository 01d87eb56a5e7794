"""Exception types raised across the buildpack.

Every failure that should stop staging derives from BuildpackError so the
CLI can report it with a single handler.
"""

from __future__ import annotations


class BuildpackError(Exception):
    """Base class for fatal staging errors."""


class ConfigSourceError(BuildpackError):
    """Raised when a declarative source (options.json, composer.json) is malformed."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"invalid JSON in {path}: {reason}")
        self.path = path


class ManifestError(BuildpackError):
    """Raised when the dependency manifest cannot answer a lookup or install."""


class RenderError(BuildpackError):
    """Raised when a template fails to compile, render or be written."""


class CommandError(BuildpackError):
    """Raised when an external command exits non-zero."""

    def __init__(self, argv, returncode: int):
        super().__init__(f"command {' '.join(str(a) for a in argv)!r} exited with status {returncode}")
        self.returncode = returncode


class HttpError(BuildpackError):
    """Raised when a download cannot be completed."""


class StepError(BuildpackError):
    """A pipeline step failed; the message is prefixed with the phase label."""

    def __init__(self, phase: str, cause: BaseException):
        super().__init__(f"{phase}: {cause}")
        self.phase = phase
        self.cause = cause
