"""Render template trees once per binding context.

Rendering itself is a pure function of (template, context). ``render_tree``
only sequences the files and writes the two results; a file's outputs are
written after both renders succeeded, but files finished earlier in the
walk stay on disk if a later one fails.
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from typing import List, Mapping

from jinja2 import Environment, StrictUndefined, Template, TemplateError

from constants import Constants
from common.errors import RenderError
from common.logging_utils import extra_context, is_debug_enabled
from .context import BindingContext
from .tree import TemplateEntry, TemplateTree

logger = logging.getLogger(__name__)

_GO_STYLE_RE = re.compile(r"\{\{\s*\.([A-Za-z_][A-Za-z0-9_]*)\s*\}\}")

_jinja = Environment(
    autoescape=False,
    undefined=StrictUndefined,
    keep_trailing_newline=True,
    trim_blocks=False,
    lstrip_blocks=False,
)


@dataclass(frozen=True)
class RenderedFile:
    path: str
    stage_dest: str
    run_dest: str


def rewrite_legacy_tokens(text: str) -> str:
    """Map bracketed placeholders (and ``{{.Name}}``) to Jinja variables."""
    for token, replacement in Constants.LEGACY_TOKENS:
        text = text.replace(token, replacement)
    return _GO_STYLE_RE.sub(r"{{ \1 }}", text)


def compile_template(entry: TemplateEntry) -> Template:
    try:
        text = entry.content.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise RenderError(f"{entry.origin}: not valid UTF-8: {exc}") from exc
    try:
        return _jinja.from_string(rewrite_legacy_tokens(text))
    except TemplateError as exc:
        raise RenderError(f"{entry.origin}: {exc}") from exc


def render_for_context(template: Template, context: Mapping[str, str]) -> bytes:
    """Render one compiled template against one context."""
    return template.render(**dict(context)).encode("utf-8")


def _render(entry: TemplateEntry, template: Template, ctx: BindingContext) -> bytes:
    try:
        return render_for_context(template, ctx)
    except TemplateError as exc:
        raise RenderError(f"{entry.origin} ({ctx.name} context): {exc}") from exc


def _write(path: str, content: bytes) -> None:
    try:
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "wb") as fh:
            fh.write(content)
    except OSError as exc:
        raise RenderError(f"could not write {path}: {exc}") from exc


def render_tree(
    tree: TemplateTree,
    stage_ctx: BindingContext,
    run_ctx: BindingContext,
    stage_root: str,
    run_root: str,
) -> List[RenderedFile]:
    """Render every entry into both destination roots; stops at the first failure."""
    written = []
    for entry in tree:
        if is_debug_enabled(logger):
            logger.debug(
                "WriteConfigFile: %s",
                entry.origin,
                extra=extra_context(event="render", component="templating", target=entry.path, layer=entry.layer),
            )
        template = compile_template(entry)
        stage_bytes = _render(entry, template, stage_ctx)
        run_bytes = _render(entry, template, run_ctx)

        rel = entry.path.replace("/", os.sep)
        stage_dest = os.path.join(stage_root, rel)
        run_dest = os.path.join(run_root, rel)
        _write(stage_dest, stage_bytes)
        _write(run_dest, run_bytes)
        written.append(RenderedFile(path=entry.path, stage_dest=stage_dest, run_dest=run_dest))
    return written
