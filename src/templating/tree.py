"""Discovery of configuration template trees.

Defaults ship inside this package under ``defaults/``; PHP templates are
grouped by version line (``php/7.2.x``) so every patch release of a line
shares one set. Applications may shadow any file by placing one at the same
relative path under ``.bp-config/php`` or ``.bp-config/httpd``.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from importlib import resources
from typing import Dict, Iterator, List, Tuple

from constants import Constants
from common.errors import RenderError

logger = logging.getLogger(__name__)

DEFAULT_LAYER = "default"
OVERRIDE_LAYER = "override"


@dataclass(frozen=True)
class TemplateEntry:
    """One template, keyed by its path relative to a destination root."""
    path: str
    content: bytes
    origin: str
    layer: str


@dataclass
class TemplateTree:
    """Templates keyed by destination path; later layers shadow earlier ones."""
    entries: Dict[str, TemplateEntry] = field(default_factory=dict)

    def add(self, entry: TemplateEntry) -> None:
        previous = self.entries.get(entry.path)
        if previous is not None:
            logger.debug("%s template %s shadows %s", entry.layer, entry.origin, previous.origin)
        self.entries[entry.path] = entry

    def __iter__(self) -> Iterator[TemplateEntry]:
        for path in sorted(self.entries):
            yield self.entries[path]

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, path: object) -> bool:
        return path in self.entries


def _walk_traversable(node, prefix: str = "") -> Iterator[Tuple[str, bytes]]:
    for child in sorted(node.iterdir(), key=lambda c: c.name):
        rel = f"{prefix}{child.name}"
        if child.is_dir():
            yield from _walk_traversable(child, rel + "/")
        else:
            yield rel, child.read_bytes()


def default_mappings(php_version_line: str) -> List[Tuple[str, str]]:
    """(source dir inside ``defaults/``, destination dir) pairs."""
    return [
        (f"php/{php_version_line}", Constants.PHP_CONF_DEST),
        ("httpd", Constants.HTTPD_CONF_DEST),
    ]


def override_mappings(build_dir: str) -> List[Tuple[str, str]]:
    base = os.path.join(build_dir, Constants.BP_CONFIG_DIR)
    return [
        (os.path.join(base, "php"), Constants.PHP_CONF_DEST),
        (os.path.join(base, "httpd"), Constants.HTTPD_CONF_DEST),
    ]


def load_default_layer(php_version_line: str) -> List[TemplateEntry]:
    """Packaged templates for the given PHP version line and for httpd."""
    root = resources.files(__package__).joinpath("defaults")
    entries = []
    for src, dest in default_mappings(php_version_line):
        node = root
        for part in src.split("/"):
            node = node.joinpath(part)
        if not node.is_dir():
            raise RenderError(f"no default configuration templates found for {src}")
        for rel, content in _walk_traversable(node):
            entries.append(TemplateEntry(
                path=f"{dest}/{rel}",
                content=content,
                origin=f"defaults/{src}/{rel}",
                layer=DEFAULT_LAYER,
            ))
    return entries


def load_override_layer(build_dir: str) -> List[TemplateEntry]:
    """Templates the application supplies under ``.bp-config``; absent dirs are skipped."""
    entries = []
    for src, dest in override_mappings(build_dir):
        if not os.path.isdir(src):
            continue
        for dirpath, dirnames, filenames in os.walk(src):
            dirnames.sort()
            for name in sorted(filenames):
                full = os.path.join(dirpath, name)
                rel = os.path.relpath(full, src).replace(os.sep, "/")
                try:
                    with open(full, "rb") as fh:
                        content = fh.read()
                except OSError as exc:
                    raise RenderError(f"could not read template {full}: {exc}") from exc
                entries.append(TemplateEntry(path=f"{dest}/{rel}", content=content, origin=full, layer=OVERRIDE_LAYER))
    return entries


def load_template_tree(build_dir: str, php_version_line: str) -> TemplateTree:
    tree = TemplateTree()
    for entry in load_default_layer(php_version_line):
        tree.add(entry)
    for entry in load_override_layer(build_dir):
        tree.add(entry)
    return tree
