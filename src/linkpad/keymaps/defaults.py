"""Built-in keymaps that seed each mode with the editor's key grammar."""

from __future__ import annotations

from typing import Iterable, Sequence

from linkpad.actions import core as core_actions
from linkpad.actions import edits as edit_actions
from linkpad.actions import insert as insert_actions
from linkpad.actions import motions as motion_actions
from linkpad.actions import operators as operator_actions
from linkpad.actions import visual as visual_actions

from .models import ActionRef, Binding
from .registry import KeymapRegistry

DEFAULT_ACTIONS: tuple[ActionRef, ...] = (
    ActionRef(
        id="core.enter_insert",
        handler=core_actions.enter_insert_mode,
        description="Enter insert mode",
    ),
    ActionRef(
        id="core.append",
        handler=core_actions.append_after_cursor,
        description="Insert after the cursor",
    ),
    ActionRef(
        id="core.append_line_end",
        handler=core_actions.append_at_line_end,
        description="Insert at end of line",
    ),
    ActionRef(
        id="core.insert_line_head",
        handler=core_actions.insert_at_line_head,
        description="Insert at line head",
    ),
    ActionRef(
        id="core.open_below",
        handler=core_actions.open_line_below,
        description="Open a line below and insert",
    ),
    ActionRef(
        id="core.open_above",
        handler=core_actions.open_line_above,
        description="Open a line above and insert",
    ),
    ActionRef(
        id="core.exit_to_normal",
        handler=core_actions.exit_to_normal_mode,
        description="Return to normal mode",
    ),
    ActionRef(
        id="core.enter_visual",
        handler=core_actions.enter_visual_mode,
        description="Enter visual mode",
    ),
    ActionRef(
        id="core.enter_visual_line",
        handler=core_actions.enter_visual_line_mode,
        description="Select the whole line",
    ),
    ActionRef(id="motion.left", handler=motion_actions.move_left),
    ActionRef(id="motion.right", handler=motion_actions.move_right),
    ActionRef(id="motion.up", handler=motion_actions.move_up),
    ActionRef(id="motion.down", handler=motion_actions.move_down),
    ActionRef(id="motion.word_forward", handler=motion_actions.word_forward),
    ActionRef(id="motion.word_back", handler=motion_actions.word_back),
    ActionRef(id="motion.line_head", handler=motion_actions.line_head),
    ActionRef(id="motion.line_end", handler=motion_actions.line_end),
    ActionRef(
        id="motion.bottom",
        handler=motion_actions.buffer_bottom,
        description="Go to the last line",
    ),
    ActionRef(id="edit.paste", handler=edit_actions.paste, description="Paste"),
    ActionRef(id="edit.undo", handler=edit_actions.undo, description="Undo"),
    ActionRef(id="edit.redo", handler=edit_actions.redo, description="Redo"),
    ActionRef(
        id="edit.delete_next_char",
        handler=edit_actions.delete_next_char,
        description="Delete the character under the cursor",
    ),
    ActionRef(
        id="edit.delete_to_line_end",
        handler=edit_actions.delete_to_line_end,
        description="Delete to end of line",
    ),
    ActionRef(
        id="edit.change_to_line_end",
        handler=edit_actions.change_to_line_end,
        description="Delete to end of line and insert",
    ),
    ActionRef(id="edit.search_next", handler=edit_actions.search_next),
    ActionRef(id="edit.search_previous", handler=edit_actions.search_previous),
    ActionRef(id="operator.delete", handler=operator_actions.open_delete),
    ActionRef(id="operator.yank", handler=operator_actions.open_yank),
    ActionRef(id="operator.goto", handler=operator_actions.open_goto),
    ActionRef(id="operator.find_forward", handler=operator_actions.open_find_forward),
    ActionRef(
        id="operator.find_backward", handler=operator_actions.open_find_backward
    ),
    ActionRef(
        id="operator.hop",
        handler=operator_actions.open_hop,
        description="Jump to a two-character match",
    ),
    ActionRef(id="visual.copy", handler=visual_actions.copy_selection),
    ActionRef(id="visual.cut", handler=visual_actions.cut_selection),
    ActionRef(id="visual.align_left", handler=visual_actions.align_left),
    ActionRef(id="visual.align_center", handler=visual_actions.align_center),
    ActionRef(id="visual.align_right", handler=visual_actions.align_right),
    ActionRef(
        id="visual.link",
        handler=visual_actions.anchor_selection,
        description="Link the selection to another note",
    ),
    ActionRef(id="insert.newline", handler=insert_actions.newline),
    ActionRef(id="insert.backspace", handler=insert_actions.backspace),
    ActionRef(id="insert.delete", handler=insert_actions.delete_forward),
    ActionRef(id="insert.tab", handler=insert_actions.tab),
    ActionRef(id="insert.left", handler=insert_actions.arrow_left),
    ActionRef(id="insert.right", handler=insert_actions.arrow_right),
    ActionRef(id="insert.up", handler=insert_actions.arrow_up),
    ActionRef(id="insert.down", handler=insert_actions.arrow_down),
    ActionRef(id="insert.home", handler=insert_actions.home),
    ActionRef(id="insert.end", handler=insert_actions.end),
)

MOTION_KEYS: tuple[tuple[str, str], ...] = (
    ("h", "motion.left"),
    ("left", "motion.left"),
    ("l", "motion.right"),
    ("right", "motion.right"),
    ("k", "motion.up"),
    ("up", "motion.up"),
    ("j", "motion.down"),
    ("down", "motion.down"),
    ("w", "motion.word_forward"),
    ("b", "motion.word_back"),
    ("^", "motion.line_head"),
    ("$", "motion.line_end"),
    ("G", "motion.bottom"),
    ("g", "operator.goto"),
    ("f", "operator.find_forward"),
    ("F", "operator.find_backward"),
)

NORMAL_KEYS: tuple[tuple[str, str], ...] = (
    ("d", "operator.delete"),
    ("y", "operator.yank"),
    ("s", "operator.hop"),
    ("p", "edit.paste"),
    ("u", "edit.undo"),
    ("r", "edit.redo"),
    ("x", "edit.delete_next_char"),
    ("D", "edit.delete_to_line_end"),
    ("C", "edit.change_to_line_end"),
    ("n", "edit.search_next"),
    ("N", "edit.search_previous"),
    ("i", "core.enter_insert"),
    ("a", "core.append"),
    ("A", "core.append_line_end"),
    ("I", "core.insert_line_head"),
    ("o", "core.open_below"),
    ("O", "core.open_above"),
    ("v", "core.enter_visual"),
    ("V", "core.enter_visual_line"),
)

VISUAL_KEYS: tuple[tuple[str, str], ...] = (
    ("escape", "core.exit_to_normal"),
    ("v", "core.exit_to_normal"),
    ("y", "visual.copy"),
    ("x", "visual.cut"),
    ("<", "visual.align_left"),
    ("=", "visual.align_center"),
    (">", "visual.align_right"),
    ("ctrl+l", "visual.link"),
)

INSERT_KEYS: tuple[tuple[str, str], ...] = (
    ("escape", "core.exit_to_normal"),
    ("enter", "insert.newline"),
    ("backspace", "insert.backspace"),
    ("delete", "insert.delete"),
    ("tab", "insert.tab"),
    ("left", "insert.left"),
    ("right", "insert.right"),
    ("up", "insert.up"),
    ("down", "insert.down"),
    ("home", "insert.home"),
    ("end", "insert.end"),
)


def _bindings(mode: str, table: Iterable[tuple[str, str]]) -> tuple[Binding, ...]:
    return tuple(
        Binding.for_key(mode, key, action_id, description=f"{mode} {key}")
        for key, action_id in table
    )


DEFAULT_BINDINGS: tuple[Binding, ...] = (
    _bindings("normal", MOTION_KEYS + NORMAL_KEYS)
    + _bindings("visual", MOTION_KEYS + VISUAL_KEYS)
    + _bindings("insert", INSERT_KEYS)
)


def load_default_keymaps(
    registry: KeymapRegistry,
    *,
    replace: bool = False,
    extra_bindings: Iterable[Binding] | None = None,
    exclude_bindings: Sequence[str] | None = None,
) -> None:
    """Register built-in actions and bindings for every mode."""

    excluded = set(exclude_bindings or ())
    for action in DEFAULT_ACTIONS:
        registry.register_action(action, replace=replace)

    for binding in DEFAULT_BINDINGS:
        if binding.id in excluded:
            continue
        registry.register_binding(binding, replace=replace)

    if extra_bindings:
        for binding in extra_bindings:
            registry.register_binding(binding, replace=True)


def build_default_registry(*, logger_name: str | None = None) -> KeymapRegistry:
    registry = KeymapRegistry(logger_name=logger_name)
    load_default_keymaps(registry)
    return registry


__all__ = [
    "load_default_keymaps",
    "build_default_registry",
    "DEFAULT_ACTIONS",
    "DEFAULT_BINDINGS",
]
