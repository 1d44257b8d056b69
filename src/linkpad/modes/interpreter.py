"""Modal command interpreter: one keystroke in, buffer operations out."""

from __future__ import annotations

from typing import Callable, Dict, Iterable, Optional

from linkpad.buffer import Buffer
from linkpad.keymaps import KeymapRegistry, ResolutionMatch, build_default_registry
from linkpad.runtime import telemetry

from .base_mode import ModeBus, ModeContext, ModeResult
from .keymap_helpers import is_printable, key_to_token, make_key_input
from .repeat import RepeatEngine, count_from_digits
from .state import CommandState, EditorMode, PendingInput

HOP_PATTERN_LENGTH = 2
HOP_TERMINATORS = frozenset({"h", "enter"})

Completion = Callable[[str], ModeResult]


class CommandInterpreter:
    """State machine over ``(mode, command)`` driving a :class:`Buffer`.

    Single keys in Normal and Visual resolve through the keymap registry.
    Once an operator opener arms a pending command, the following key is
    routed to that command's completion instead. Unrecognized keys reset
    the pending input and are otherwise ignored.
    """

    def __init__(
        self,
        buffer: Buffer,
        *,
        registry: Optional[KeymapRegistry] = None,
        repeat: Optional[RepeatEngine] = None,
        bus: Optional[ModeBus] = None,
    ) -> None:
        self.logger = telemetry.get_logger("linkpad.modes.interpreter")
        self.registry = registry or build_default_registry()
        self.context = ModeContext(
            buffer=buffer,
            registers=buffer.registers,
            bus=bus or ModeBus(),
            pending=PendingInput(),
            repeat=repeat or RepeatEngine(),
        )
        self.mode = EditorMode.NORMAL
        self.command = CommandState.NO_COMMAND
        self._completions: Dict[CommandState, Completion] = {
            CommandState.DELETE: self._complete_delete,
            CommandState.YANK: self._complete_yank,
            CommandState.GOTO: self._complete_goto,
            CommandState.FIND_FORWARD: self._complete_find_forward,
            CommandState.FIND_BACKWARD: self._complete_find_backward,
            CommandState.PRIME_HOP: self._complete_prime_hop,
            CommandState.EXECUTE_HOP: self._complete_execute_hop,
        }

    @property
    def buffer(self) -> Buffer:
        return self.context.buffer

    @property
    def pending(self) -> PendingInput:
        return self.context.pending

    @property
    def repeat(self) -> RepeatEngine:
        return self.context.repeat

    def handle_input(self, key: str, modifiers: Iterable[str] = ()) -> ModeResult:
        token = key_to_token(make_key_input(key, modifiers))
        version = self.buffer.version
        if self.mode is EditorMode.INSERT:
            result = self._handle_insert(token)
        else:
            result = self._handle_modal(token)
        if result.command is not None:
            self.command = result.command
        if result.switch_to is not None:
            self.set_mode(result.switch_to)
        if self.buffer.version != version:
            self.repeat.record_column(self.buffer)
        return result

    def set_mode(self, mode: EditorMode) -> None:
        """Switch modes, clearing selection, search highlight, and pending input."""

        previous = self.mode
        buffer = self.buffer
        buffer.clear_search()
        if mode is EditorMode.VISUAL:
            if buffer.state.selection_start is None:
                buffer.start_selection()
        else:
            buffer.cancel_selection()
        self.mode = mode
        self.reset_pending()
        if previous is not mode:
            telemetry.record_event(
                "interpreter.mode",
                level="debug",
                data={"from": previous.value, "to": mode.value},
                logger_name="linkpad.modes.interpreter",
            )
            self.context.bus.emit("mode_changed", mode)

    def reset_pending(self) -> None:
        self.command = CommandState.NO_COMMAND
        self.pending.clear()

    @property
    def status_label(self) -> str:
        pending = "".join(str(d) for d in self.pending.num_buf) + self.pending.command_text
        return f"{self.mode.value.upper()} {pending}".rstrip()

    # -- dispatch ----------------------------------------------------------

    def _handle_insert(self, token: str) -> ModeResult:
        match = self.registry.lookup(EditorMode.INSERT.value, token)
        if match is not None:
            return self._execute_match(match)
        if is_printable(token):
            self.buffer.insert_text(token)
            return ModeResult(consumed=True)
        return ModeResult(consumed=False, status="ignored")

    def _handle_modal(self, token: str) -> ModeResult:
        if self.command is not CommandState.NO_COMMAND:
            return self._completions[self.command](token)

        if len(token) == 1 and token.isdigit():
            self.pending.push_digit(int(token))
            return ModeResult(consumed=True, status="pending", message="count")

        match = self.registry.lookup(self.mode.value, token)
        if match is None:
            self.logger.debug("unbound key %r in %s mode", token, self.mode.value)
            self.reset_pending()
            return ModeResult(consumed=False, status="ignored")

        result = self._execute_match(match)
        if result.command is None:
            self.reset_pending()
        return result

    def _execute_match(self, match: ResolutionMatch) -> ModeResult:
        with telemetry.span(
            "keymaps::execute",
            logger_name="linkpad.modes.interpreter",
            component="keymaps",
            metadata={"binding_id": match.binding.id, "action": match.action.id},
        ):
            outcome = match.action(self.context, match)

        if isinstance(outcome, ModeResult):
            return outcome
        return ModeResult(consumed=True)

    def _abort(self, token: str) -> ModeResult:
        self.logger.debug(
            "abandoning %s on key %r", self.command.value, token
        )
        self.reset_pending()
        return ModeResult(consumed=True, status="aborted")

    def _finish(self, message: str) -> ModeResult:
        self.reset_pending()
        return ModeResult(consumed=True, message=message)

    # -- completions -------------------------------------------------------

    def _line_primitive(self, token: str) -> Optional[Callable[[], object]]:
        """Single-step primitive shared by the delete and yank operators."""

        buffer = self.buffer
        if token in ("d", "j"):
            start_row = buffer.cursor[0]

            def delete_down() -> None:
                if buffer.cursor[0] >= start_row:
                    buffer.delete_line()

            return delete_down
        if token == "k":
            return lambda: buffer.delete_line(move_up=True)
        return self._char_primitive(token)

    def _char_primitive(self, token: str) -> Optional[Callable[[], object]]:
        buffer = self.buffer
        primitives: Dict[str, Callable[[], object]] = {
            "h": buffer.delete_char,
            "l": buffer.delete_next_char,
            "w": buffer.delete_next_word,
            "b": buffer.delete_word,
        }
        return primitives.get(token)

    def _complete_delete(self, token: str) -> ModeResult:
        primitive = self._line_primitive(token)
        if primitive is None:
            return self._abort(token)
        self.repeat.repeat(self.pending.num_buf, primitive)
        return self._finish(f"d{token}")

    def _complete_yank(self, token: str) -> ModeResult:
        primitive = self._char_primitive(token) if token in ("l", "w", "b") else None
        if primitive is None:
            return self._abort(token)
        self.repeat.repeat(self.pending.num_buf, primitive)
        return self._finish(f"y{token}")

    def _complete_goto(self, token: str) -> ModeResult:
        if token != "g":
            return self._abort(token)
        digits = self.pending.num_buf
        row = count_from_digits(digits) - 1 if digits else 0
        self.buffer.jump(row, 0)
        self.repeat.record_column(self.buffer)
        return self._finish("gg")

    def _complete_find_forward(self, token: str) -> ModeResult:
        if not is_printable(token):
            return self._abort(token)
        row, col = self.buffer.cursor
        found = self.buffer.line(row).find(token, col + 1)
        if found != -1:
            self.buffer.jump(row, found)
            self.repeat.record_column(self.buffer)
        return self._finish(f"f{token}")

    def _complete_find_backward(self, token: str) -> ModeResult:
        if not is_printable(token):
            return self._abort(token)
        row, col = self.buffer.cursor
        found = self.buffer.line(row).rfind(token, 0, col)
        if found != -1:
            self.buffer.jump(row, found)
            self.repeat.record_column(self.buffer)
        return self._finish(f"F{token}")

    def _complete_prime_hop(self, token: str) -> ModeResult:
        if not is_printable(token):
            return self._abort(token)
        self.pending.push_command(token)
        if len(self.pending.cmd_buf) < HOP_PATTERN_LENGTH:
            return ModeResult(consumed=True, status="pending", message="prime_hop")
        matches = self.buffer.set_hop_pattern(self.pending.command_text)
        self.pending.num_buf.clear()
        self.command = CommandState.EXECUTE_HOP
        return ModeResult(
            consumed=True, status="pending", message=f"hop_matches:{matches}"
        )

    def _complete_execute_hop(self, token: str) -> ModeResult:
        if len(token) == 1 and token.isdigit():
            self.pending.push_digit(int(token))
            return ModeResult(consumed=True, status="pending", message="hop_index")
        if token not in HOP_TERMINATORS:
            self.buffer.clear_hop()
            return self._abort(token)
        digits = self.pending.num_buf
        index = count_from_digits(digits) if digits else 0
        jumped = self.buffer.hop_to_idx(index)
        self.buffer.clear_hop()
        if jumped:
            self.repeat.record_column(self.buffer)
        return self._finish(f"hop:{index}")


__all__ = ["CommandInterpreter", "HOP_TERMINATORS"]
