"""Textual host: adapter, renderer, and the runnable app."""

from .controller import TextualEditorAdapter, TextualUIHooks
from .render import render_mirror

__all__ = ["TextualEditorAdapter", "TextualUIHooks", "render_mirror"]
