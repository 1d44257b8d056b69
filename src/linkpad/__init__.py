"""Modal terminal note editor with text-anchored links between notes."""

__all__ = [
    "actions",
    "adapters",
    "buffer",
    "config",
    "keymaps",
    "links",
    "modes",
    "notes",
    "runtime",
    "session",
    "storage",
]

__version__ = "0.1.0"
