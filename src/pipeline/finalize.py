"""Finalize phase: start script and release descriptor."""

from __future__ import annotations

import logging
import os

import yaml

from constants import Constants
from common.errors import BuildpackError, StepError
from common.logging_utils import begin_step
from staging.stager import Stager
from .scripts import release_descriptor, start_script
from .supply import write_executable

logger = logging.getLogger(__name__)


class Finalizer:
    """Writes the artefacts the platform needs to start the container."""

    def __init__(self, stager: Stager, release_path: str = Constants.RELEASE_YAML):
        self.stager = stager
        self.release_path = release_path

    def run(self) -> None:
        begin_step(logger, "Finalizing php")
        for phase, step in (("writing start file", self.write_start_file),
                            ("writing release YAML", self.write_release_yaml)):
            try:
                step()
            except (BuildpackError, OSError, yaml.YAMLError) as exc:
                logger.error("Error while %s: %s", phase, exc)
                raise StepError(phase, exc) from exc

    def write_start_file(self) -> None:
        write_executable(
            os.path.join(self.stager.dep_dir, "bin", Constants.START_SCRIPT),
            start_script(self.stager.deps_idx, verify_first=True),
        )

    def write_release_yaml(self) -> None:
        data = release_descriptor(self.stager.deps_idx, Constants.START_SCRIPT)
        os.makedirs(os.path.dirname(self.release_path) or ".", exist_ok=True)
        with open(self.release_path, "w", encoding="utf-8") as fh:
            yaml.safe_dump(data, fh, default_flow_style=False)
