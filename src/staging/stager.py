"""Directory layout of one staging invocation."""

from __future__ import annotations

import logging
import os

logger = logging.getLogger(__name__)


class Stager:
    """Build, cache and dependency directories handed to supply/finalize.

    Dependencies for this buildpack live in ``<deps_dir>/<deps_idx>``; at
    runtime that directory is reachable as ``$DEPS_DIR/<deps_idx>``.
    """

    def __init__(self, build_dir: str, cache_dir: str, deps_dir: str, deps_idx: str):
        self.build_dir = build_dir
        self.cache_dir = cache_dir
        self.deps_dir = deps_dir
        self.deps_idx = deps_idx

    @property
    def dep_dir(self) -> str:
        return os.path.join(self.deps_dir, self.deps_idx)

    def link_directory_in_dep_dir(self, dest_dir: str, dep_sub_dir: str) -> None:
        """Symlink every entry of ``dest_dir`` into ``<dep_dir>/<dep_sub_dir>``."""
        link_dir = os.path.join(self.dep_dir, dep_sub_dir)
        os.makedirs(link_dir, exist_ok=True)
        for name in sorted(os.listdir(dest_dir)):
            link = os.path.join(link_dir, name)
            target = os.path.relpath(os.path.join(dest_dir, name), link_dir)
            if os.path.lexists(link):
                os.remove(link)
            os.symlink(target, link)
        logger.debug("Linked %s into %s", dest_dir, link_dir)

    def write_profile_d(self, script_name: str, script_contents: str) -> str:
        profile_dir = os.path.join(self.dep_dir, "profile.d")
        os.makedirs(profile_dir, exist_ok=True)
        path = os.path.join(profile_dir, script_name)
        with open(path, "w", encoding="utf-8") as fh:
            fh.write(script_contents)
        return path
