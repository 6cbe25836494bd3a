"""Shared frame-building helpers for widgets."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pi.prompts import colors, symbols
from pi.prompts.options import Option
from pi.prompts.prompt import PromptState
from pi.prompts.utils import truncate_to_width

if TYPE_CHECKING:
    from pi.prompts.prompt import Prompt
    from pi.prompts.settings import Action


class BaseWidget:
    """Default behaviour for the :class:`~pi.prompts.prompt.Widget` protocol.

    Subclasses set ``message`` and override :meth:`body_lines` and
    :meth:`final_display`; the frame chrome (guide bars, state symbol,
    error and warning lines) is built here.
    """

    captures_text = False

    def __init__(self, message: str, *, help: str | None = None) -> None:
        self.message = message
        self.help = help

    # -- Widget protocol ------------------------------------------------------

    def initial_value(self) -> Any:
        return None

    def handle_input(self, prompt: Prompt, key: str, action: Action | None) -> None:
        pass

    def prepare_submit(self, prompt: Prompt) -> bool:
        return True

    def build_frame(self, prompt: Prompt) -> str:
        lines = [self.bar(prompt), f"{self.symbol_for_state(prompt)}  {self.message}"]
        help_line = self.help_line(prompt)
        if help_line:
            lines.append(help_line)
        for body in self.body_lines(prompt):
            lines.append(f"{self.active_bar(prompt)}  {body}")
        lines.extend(self.footer_lines(prompt))
        return "".join(f"{line}\n" for line in lines)

    def build_final_frame(self, prompt: Prompt) -> str:
        text = self.final_display(prompt)
        if prompt.state is PromptState.CANCEL:
            display = colors.strikethrough(colors.dim(text)) if text else ""
        else:
            display = colors.dim(text)
        lines = [
            self.bar(prompt),
            f"{self.symbol_for_state(prompt)}  {self.message}",
            f"{self.bar(prompt)}  {display}".rstrip(),
        ]
        return "".join(f"{line}\n" for line in lines)

    # -- overridables ---------------------------------------------------------

    def body_lines(self, prompt: Prompt) -> list[str]:
        return []

    def final_display(self, prompt: Prompt) -> str:
        return "" if prompt.value is None else str(prompt.value)

    # -- chrome ---------------------------------------------------------------

    def bar(self, prompt: Prompt) -> str:
        return colors.gray(symbols.BAR) if prompt.with_guide else " "

    def active_bar(self, prompt: Prompt) -> str:
        if not prompt.with_guide:
            return " "
        if prompt.state is PromptState.ERROR:
            return colors.yellow(symbols.BAR)
        if prompt.state is PromptState.WARNING:
            return colors.yellow(symbols.BAR)
        return colors.cyan(symbols.BAR)

    def bar_end(self, prompt: Prompt) -> str:
        if not prompt.with_guide:
            return " "
        if prompt.state in (PromptState.ERROR, PromptState.WARNING):
            return colors.yellow(symbols.BAR_END)
        return colors.cyan(symbols.BAR_END)

    def symbol_for_state(self, prompt: Prompt) -> str:
        state = prompt.state
        if state is PromptState.SUBMIT:
            return colors.green(symbols.STEP_SUBMIT)
        if state is PromptState.CANCEL:
            return colors.red(symbols.STEP_CANCEL)
        if state is PromptState.ERROR:
            return colors.yellow(symbols.STEP_ERROR)
        if state is PromptState.WARNING:
            return colors.yellow(symbols.STEP_WARNING)
        return colors.cyan(symbols.STEP_ACTIVE)

    def help_line(self, prompt: Prompt) -> str:
        if not self.help:
            return ""
        return f"{self.bar(prompt)}  {colors.dim(self.help)}"

    def footer_lines(self, prompt: Prompt) -> list[str]:
        """The closing bar, carrying the error or warning text when present."""
        end = self.bar_end(prompt)
        if prompt.state is PromptState.ERROR and prompt.error_message:
            first, *rest = prompt.error_message.split("\n")
            lines = [f"{end}  {colors.yellow(first)}"]
            lines.extend(f"   {colors.yellow(line)}" for line in rest)
            return lines
        if prompt.state is PromptState.WARNING and prompt.warning_message:
            return [
                f"{end}  {colors.yellow(prompt.warning_message)}",
                f"   {colors.dim('Press enter to confirm, or keep editing')}",
            ]
        return [end]

    # -- helpers --------------------------------------------------------------

    @staticmethod
    def cursor_block() -> str:
        return colors.inverse(" ")

    def fit(self, prompt: Prompt, text: str, reserved: int = 5) -> str:
        """Truncate *text* so a body line stays within the terminal width."""
        return truncate_to_width(text, max(prompt.columns - reserved, 1))


def option_hint(option: Option) -> str:
    return f" {colors.dim(f'({option.hint})')}" if option.hint else ""

