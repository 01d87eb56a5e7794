"""Configuration template discovery, binding and rendering."""

from .context import BindingContext, ContextPaths, LayoutSettings, build_contexts, diff_contexts, run_paths, stage_paths
from .renderer import RenderedFile, compile_template, render_for_context, render_tree, rewrite_legacy_tokens
from .tree import TemplateEntry, TemplateTree, load_template_tree

__all__ = [
    "BindingContext",
    "ContextPaths",
    "LayoutSettings",
    "build_contexts",
    "diff_contexts",
    "run_paths",
    "stage_paths",
    "RenderedFile",
    "compile_template",
    "render_for_context",
    "render_tree",
    "rewrite_legacy_tokens",
    "TemplateEntry",
    "TemplateTree",
    "load_template_tree",
]
