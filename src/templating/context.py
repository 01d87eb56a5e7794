"""Stage and run binding contexts for configuration templates.

Both contexts are built from one shared base so they always carry the same
keys. Only the path-bound keys and the runtime extension list differ.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Dict, Iterator, Mapping, Set, Tuple

from constants import Constants
from extensions.models import ExtensionSet
from versioning.models import ResolvedVersion
from versioning.parser import version_line

PATH_BOUND_KEYS = ("HOME", "DEPS_DIR", "TMPDIR", "COMPOSER_CACHE_DIR")
RUNTIME_EXTENSION_KEY = "PhpExtensions"


@dataclass(frozen=True)
class ContextPaths:
    """Values for the path-bound keys of one context."""
    home: str
    deps_dir: str
    tmp_dir: str
    composer_cache_dir: str

    def as_values(self) -> Dict[str, str]:
        return dict(zip(PATH_BOUND_KEYS, (self.home, self.deps_dir, self.tmp_dir, self.composer_cache_dir)))


def stage_paths(build_dir: str, deps_dir: str, cache_dir: str) -> ContextPaths:
    """Real filesystem locations inside the staging sandbox."""
    return ContextPaths(
        home=build_dir,
        deps_dir=deps_dir,
        tmp_dir=Constants.STAGE_TMPDIR,
        composer_cache_dir=os.path.join(cache_dir, "composer"),
    )


def run_paths() -> ContextPaths:
    """Environment references expanded by php/httpd when the container starts."""
    return ContextPaths(
        home=Constants.RUN_HOME,
        deps_dir=Constants.RUN_DEPS_DIR,
        tmp_dir=Constants.RUN_TMPDIR,
        composer_cache_dir=f"{Constants.RUN_TMPDIR}/composer",
    )


@dataclass(frozen=True)
class LayoutSettings:
    """User-tunable directory names from options.json."""
    webdir: str = Constants.DEFAULT_WEBDIR
    libdir: str = Constants.DEFAULT_LIBDIR


class BindingContext(Mapping[str, str]):
    """A named, read-only mapping of template variable to value."""

    def __init__(self, name: str, values: Mapping[str, str]):
        self.name = name
        self._values = dict(values)

    def __getitem__(self, key: str) -> str:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"BindingContext({self.name!r}, {self._values!r})"


def build_contexts(
    resolved: ResolvedVersion,
    extensions: ExtensionSet,
    settings: LayoutSettings,
    stage: ContextPaths,
    run: ContextPaths,
    deps_idx: str,
) -> Tuple[BindingContext, BindingContext]:
    """Return ``(stage_ctx, run_ctx)``.

    The running server always gets openssl; staging may run without it.
    """
    base = {
        "DepsIdx": deps_idx,
        "PhpVersion": resolved.version,
        "PhpVersionLine": version_line(resolved.version),
        "PhpFpmConfInclude": "",
        "PhpFpmListen": Constants.PHP_FPM_LISTEN,
        "Webdir": settings.webdir,
        "Libdir": settings.libdir,
        "PhpExtensions": extensions.php_directives(),
        "ZendExtensions": extensions.zend_directives(),
    }

    stage_values = dict(base)
    stage_values.update(stage.as_values())

    run_values = dict(base)
    run_values.update(run.as_values())
    run_values[RUNTIME_EXTENSION_KEY] = extensions.php_directives(Constants.RUNTIME_FORCED_EXTENSIONS)

    return BindingContext("stage", stage_values), BindingContext("run", run_values)


def diff_contexts(a: Mapping[str, str], b: Mapping[str, str]) -> Set[str]:
    """Keys whose values differ, including keys present in only one mapping."""
    keys = set(a) | set(b)
    return {k for k in keys if a.get(k) != b.get(k)}
