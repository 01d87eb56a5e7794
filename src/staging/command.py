"""Subprocess seam for external tools run during staging."""

from __future__ import annotations

import logging
import subprocess
import sys
from typing import Mapping, Optional, Sequence, TextIO

from constants import Constants
from common.errors import CommandError

logger = logging.getLogger(__name__)


class Command:
    """Run external programs, indenting their output into the staging log."""

    def __init__(self, stdout: Optional[TextIO] = None):
        self.stdout = stdout if stdout is not None else sys.stdout

    def run(self, args: Sequence[str], *, cwd: str, env: Mapping[str, str]) -> None:
        """Run ``args`` to completion; raise CommandError on a non-zero exit."""
        logger.debug("Running %s in %s", " ".join(args), cwd)
        try:
            proc = subprocess.Popen(
                list(args),
                cwd=cwd,
                env=dict(env),
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
            )
        except OSError as exc:
            raise CommandError(args, 127) from exc
        assert proc.stdout is not None
        with proc.stdout:
            for line in proc.stdout:
                self.stdout.write(f"{Constants.OUTPUT_INDENT}{line}")
        returncode = proc.wait()
        if returncode != 0:
            raise CommandError(args, returncode)
