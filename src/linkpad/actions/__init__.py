"""Editing verbs bound to keys by ``linkpad.keymaps.defaults``."""

from . import core, edits, insert, motions, operators, visual

__all__ = ["core", "edits", "insert", "motions", "operators", "visual"]
