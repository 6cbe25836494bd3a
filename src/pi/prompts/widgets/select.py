"""Single choice from a list of options."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterable

from pi.prompts import colors, symbols
from pi.prompts.options import Option, OptionCursor, normalize_options
from pi.prompts.prompt import Prompt
from pi.prompts.widgets.base import BaseWidget, option_hint

if TYPE_CHECKING:
    from pi.prompts.settings import Action


def scroll_markers(cursor: OptionCursor) -> tuple[str | None, str | None]:
    above = colors.dim("...") if cursor.has_more_above else None
    below = colors.dim("...") if cursor.has_more_below else None
    return above, below


class Select(BaseWidget):
    def __init__(
        self,
        message: str,
        options: Iterable[Any],
        *,
        initial_value: Any = None,
        max_items: int | None = None,
        help: str | None = None,
    ) -> None:
        super().__init__(message, help=help)
        normalized = normalize_options(options)
        if not normalized:
            raise ValueError("Select needs at least one option")
        self.cursor = OptionCursor(normalized, max_items=max_items, initial_value=initial_value)

    @property
    def current(self) -> Option:
        return self.cursor.options[self.cursor.index]

    def initial_value(self) -> Any:
        return self.current.value

    def handle_input(self, prompt: Prompt, key: str, action: Action | None) -> None:
        if action in ("up", "left"):
            self.cursor.move(-1)
        elif action in ("down", "right"):
            self.cursor.move(1)
        else:
            return
        prompt.cursor = self.cursor.index
        prompt.value = self.current.value

    def prepare_submit(self, prompt: Prompt) -> bool:
        return not self.current.disabled

    def body_lines(self, prompt: Prompt) -> list[str]:
        above, below = scroll_markers(self.cursor)
        lines = [above] if above else []
        for index, option in self.cursor.visible():
            lines.append(self.fit(prompt, self.option_line(option, index == self.cursor.index)))
        if below:
            lines.append(below)
        return lines

    def option_line(self, option: Option, active: bool) -> str:
        if option.disabled:
            return f"{colors.dim(symbols.RADIO_INACTIVE)} {colors.strikethrough(colors.dim(option.label))}"
        if active:
            return f"{colors.green(symbols.RADIO_ACTIVE)} {option.label}{option_hint(option)}"
        return f"{colors.dim(symbols.RADIO_INACTIVE)} {colors.dim(option.label)}"

    def final_display(self, prompt: Prompt) -> str:
        return self.current.label


def select(
    message: str,
    options: Iterable[Any],
    *,
    initial_value: Any = None,
    max_items: int | None = None,
    help: str | None = None,
    **prompt_options: Any,
) -> Any:
    """Return the chosen option's value, or ``CANCEL``."""
    widget = Select(message, options, initial_value=initial_value, max_items=max_items, help=help)
    return Prompt(widget, **prompt_options).run()
