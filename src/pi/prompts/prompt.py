"""The prompt state machine.

A :class:`Prompt` drives one :class:`Widget` through a single interaction::

    initial -> active -> (error | warning -> active)* -> submit | cancel

It reads one key at a time, maps it to an action, lets the widget update
its state, and repaints through a :class:`~pi.prompts.render.FrameRenderer`
only when the frame actually changed.
"""

from __future__ import annotations

import enum
import logging
import sys
from typing import IO, Any, Protocol

from pi.prompts import colors, symbols
from pi.prompts.environment import columns, is_ci, is_tty
from pi.prompts.keys import KeyReader
from pi.prompts.registry import PromptRegistry, default_registry
from pi.prompts.render import FrameRenderer
from pi.prompts.settings import Action, Settings, get_settings, is_printable
from pi.prompts.terminal import TerminalSession
from pi.prompts.validation import (
    Invalid,
    Transform,
    Validator,
    Warning,
    resolve_transform,
    run_validator,
)

logger = logging.getLogger(__name__)


class PromptState(enum.Enum):
    INITIAL = "initial"
    ACTIVE = "active"
    ERROR = "error"
    WARNING = "warning"
    SUBMIT = "submit"
    CANCEL = "cancel"


_TERMINAL_STATES = (PromptState.SUBMIT, PromptState.CANCEL)


class _Cancel:
    """Type of the :data:`CANCEL` sentinel."""

    _instance: _Cancel | None = None

    def __new__(cls) -> _Cancel:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "CANCEL"

    def __reduce__(self) -> str:
        return "CANCEL"


CANCEL = _Cancel()


def is_cancel(value: Any) -> bool:
    """``True`` only for the :data:`CANCEL` sentinel returned by cancelled prompts."""
    return value is CANCEL


# ---------------------------------------------------------------------------
# Protocols
# ---------------------------------------------------------------------------


class KeySource(Protocol):
    def read(self) -> str: ...


class Widget(Protocol):
    """What a prompt front-end provides to the :class:`Prompt` driver.

    ``captures_text`` widgets receive printable keys with no action so that
    letters such as ``j``/``k`` are typed rather than treated as navigation.
    """

    captures_text: bool

    def initial_value(self) -> Any: ...

    def build_frame(self, prompt: Prompt) -> str: ...

    def build_final_frame(self, prompt: Prompt) -> str: ...

    def handle_input(self, prompt: Prompt, key: str, action: Action | None) -> None: ...

    def prepare_submit(self, prompt: Prompt) -> bool: ...


# ---------------------------------------------------------------------------
# Prompt
# ---------------------------------------------------------------------------


class Prompt:
    """Runs a widget interactively and returns its value or :data:`CANCEL`."""

    def __init__(
        self,
        widget: Widget,
        *,
        validate: Validator | None = None,
        transform: str | Transform | None = None,
        input: IO[Any] | None = None,
        output: IO[str] | None = None,
        key_reader: KeySource | None = None,
        registry: PromptRegistry | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.widget = widget
        self.validate = validate
        self.transform = resolve_transform(transform)
        self.input = input if input is not None else sys.stdin
        self.output = output if output is not None else sys.stdout
        self._key_reader = key_reader
        self.registry = registry if registry is not None else default_registry()
        self.settings = settings if settings is not None else get_settings()

        self.state = PromptState.INITIAL
        self.value: Any = widget.initial_value()
        self.error_message: str | None = None
        self.warning_message: str | None = None
        self.cursor = 0
        self._warning_confirmed = False
        self.renderer = FrameRenderer(self.output)

    # -- properties ---------------------------------------------------------

    @property
    def is_terminal(self) -> bool:
        return self.state in _TERMINAL_STATES

    @property
    def previous_frame(self) -> str | None:
        return self.renderer.previous_frame

    @property
    def needs_redraw(self) -> bool:
        return self.renderer.needs_redraw

    @property
    def with_guide(self) -> bool:
        return self.settings.with_guide

    @property
    def columns(self) -> int:
        return columns(self.output)

    # -- running ------------------------------------------------------------

    def run(self) -> Any:
        """Interact until submit or cancel.

        Returns the (transformed) value on submit and :data:`CANCEL` when the
        user cancels.
        """
        if self.non_interactive():
            return self._run_non_interactive()

        with self.registry.track(self), TerminalSession(self._raw_input(), self.output):
            reader = self._key_reader or KeyReader(self._input_fd())
            self.render()
            self.state = PromptState.ACTIVE
            while not self.is_terminal:
                self.handle_key(reader.read())
                if not self.is_terminal:
                    self.render()
            self.renderer.finalize(self.widget.build_final_frame(self))

        if self.state is PromptState.CANCEL:
            return CANCEL
        return self.value

    def non_interactive(self) -> bool:
        mode = self.settings.ci_mode
        if mode == "auto":
            if self._key_reader is not None:
                return False
            return not is_tty(self.input) or is_ci()
        return bool(mode)

    def _raw_input(self) -> IO[Any] | None:
        return None if self._key_reader is not None else self.input

    def _input_fd(self) -> int:
        try:
            return self.input.fileno()
        except (AttributeError, OSError, ValueError):
            logger.debug("input has no file descriptor; key reads will cancel")
            return -1

    def _run_non_interactive(self) -> Any:
        self.state = PromptState.ACTIVE
        self.submit()
        if self.state in (PromptState.ERROR, PromptState.WARNING):
            message = self.error_message or self.warning_message
            logger.warning("non-interactive prompt accepted a failing value: %s", message)
            self.output.write(
                f"{colors.yellow(symbols.STEP_WARNING)}  "
                f"{colors.yellow(f'{message} (non-interactive mode)')}\n"
            )
            self.error_message = None
            self.warning_message = None
        self.state = PromptState.SUBMIT
        self.output.write(self.widget.build_final_frame(self))
        self.output.flush()
        return self.value

    # -- rendering ----------------------------------------------------------

    def render(self) -> bool:
        return self.renderer.render(self.widget.build_frame(self))

    def request_redraw(self) -> None:
        self.renderer.request_redraw()

    # -- key handling -------------------------------------------------------

    def handle_key(self, key: str) -> None:
        """Advance the state machine by one decoded key."""
        if self.is_terminal:
            return

        action = self.settings.action(key)
        if self.widget.captures_text and is_printable(key):
            action = None

        if self.state is PromptState.WARNING:
            if action == "enter":
                self._warning_confirmed = True
                self.warning_message = None
                self.state = PromptState.ACTIVE
                self.submit()
                return
            if action == "cancel":
                self.cancel()
                return
            # Any other key edits the value; it must be validated afresh
            self.warning_message = None
            self._warning_confirmed = False
            self.state = PromptState.ACTIVE
        elif self.state is PromptState.ERROR:
            self.error_message = None
            self.state = PromptState.ACTIVE

        if action == "cancel":
            self.cancel()
        elif action == "enter":
            self.submit()
        else:
            self.widget.handle_input(self, key, action)

    # -- transitions --------------------------------------------------------

    def submit(self) -> None:
        """Validate, transform and commit the current value."""
        if not self.widget.prepare_submit(self):
            return

        outcome = run_validator(self.validate, self.value)
        if isinstance(outcome, Invalid):
            self.fail(outcome.message)
            return
        if isinstance(outcome, Warning) and not self._warning_confirmed:
            self.warn(outcome.message)
            return
        self._warning_confirmed = False

        if self.transform is not None:
            try:
                transformed = self.transform(self.value)
            except Exception as exc:
                self.fail(f"Transform failed: {exc}")
                return
            self.value = transformed

        self.state = PromptState.SUBMIT

    def fail(self, message: str) -> None:
        self.error_message = message
        self.state = PromptState.ERROR

    def warn(self, message: str) -> None:
        self.warning_message = message
        self.state = PromptState.WARNING

    def cancel(self) -> None:
        self.state = PromptState.CANCEL
