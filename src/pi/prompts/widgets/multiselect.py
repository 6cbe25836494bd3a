"""Multiple choice from a list of options."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterable

from pi.prompts import colors, symbols
from pi.prompts.options import Option, OptionCursor, normalize_options
from pi.prompts.prompt import Prompt
from pi.prompts.widgets.base import BaseWidget, option_hint
from pi.prompts.widgets.select import scroll_markers

if TYPE_CHECKING:
    from pi.prompts.settings import Action

REQUIRED_MESSAGE = (
    "Please select at least one option.\n"
    f"Press {colors.cyan('space')} to select, {colors.cyan('enter')} to submit"
)


def checkbox_line(option: Option, active: bool, selected: bool) -> str:
    if option.disabled:
        return f"{colors.dim(symbols.CHECKBOX_INACTIVE)} {colors.strikethrough(colors.dim(option.label))}"
    if active and selected:
        return f"{colors.green(symbols.CHECKBOX_SELECTED)} {option.label}{option_hint(option)}"
    if active:
        return f"{colors.cyan(symbols.CHECKBOX_ACTIVE)} {option.label}{option_hint(option)}"
    if selected:
        return f"{colors.green(symbols.CHECKBOX_SELECTED)} {colors.dim(option.label)}"
    return f"{colors.dim(symbols.CHECKBOX_INACTIVE)} {colors.dim(option.label)}"


class Selection:
    """Selected values, compared by equality and reported in option order.

    Values need not be hashable, so membership is a linear scan.
    """

    def __init__(self, options: list[Option], initial: Iterable[Any] = ()) -> None:
        self.options = options
        self._values: list[Any] = []
        for value in initial:
            self.add(value)

    def __contains__(self, value: Any) -> bool:
        return any(v == value for v in self._values)

    def __len__(self) -> int:
        return len(self._values)

    def add(self, value: Any) -> None:
        if value not in self:
            self._values.append(value)

    def discard(self, value: Any) -> None:
        self._values = [v for v in self._values if v != value]

    def toggle(self, value: Any) -> None:
        if value in self:
            self.discard(value)
        else:
            self.add(value)

    def clear(self) -> None:
        self._values = []

    def values(self) -> list[Any]:
        ordered = [o.value for o in self.options if o.value in self]
        extra = [v for v in self._values if not any(o.value == v for o in self.options)]
        return ordered + extra


class Multiselect(BaseWidget):
    def __init__(
        self,
        message: str,
        options: Iterable[Any],
        *,
        initial_values: Iterable[Any] = (),
        required: bool = True,
        max_items: int | None = None,
        cursor_at: Any = None,
        help: str | None = None,
    ) -> None:
        super().__init__(message, help=help)
        normalized = normalize_options(options)
        if not normalized:
            raise ValueError("Multiselect needs at least one option")
        self.cursor = OptionCursor(normalized, max_items=max_items, initial_value=cursor_at)
        self.selection = Selection(normalized, initial_values)
        self.required = required

    @property
    def enabled_values(self) -> list[Any]:
        return [o.value for o in self.cursor.options if not o.disabled]

    def initial_value(self) -> Any:
        return self.selection.values()

    def handle_input(self, prompt: Prompt, key: str, action: Action | None) -> None:
        if action == "up":
            self.cursor.move(-1)
            prompt.cursor = self.cursor.index
            return
        if action == "down":
            self.cursor.move(1)
            prompt.cursor = self.cursor.index
            return

        if action == "space":
            self.toggle_current()
        elif key.lower() == "a":
            self.toggle_all()
        elif key.lower() == "i":
            self.invert()
        else:
            return
        prompt.value = self.selection.values()

    def toggle_current(self) -> None:
        option = self.cursor.current
        if option is not None and not option.disabled:
            self.selection.toggle(option.value)

    def toggle_all(self) -> None:
        enabled = self.enabled_values
        if all(value in self.selection for value in enabled):
            for value in enabled:
                self.selection.discard(value)
        else:
            for value in enabled:
                self.selection.add(value)

    def invert(self) -> None:
        for value in self.enabled_values:
            self.selection.toggle(value)

    def prepare_submit(self, prompt: Prompt) -> bool:
        if self.required and not prompt.value:
            prompt.fail(REQUIRED_MESSAGE)
            return False
        return True

    def body_lines(self, prompt: Prompt) -> list[str]:
        above, below = scroll_markers(self.cursor)
        lines = [above] if above else []
        for index, option in self.cursor.visible():
            line = checkbox_line(option, index == self.cursor.index, option.value in self.selection)
            lines.append(self.fit(prompt, line))
        if below:
            lines.append(below)
        return lines

    def final_display(self, prompt: Prompt) -> str:
        return ", ".join(o.label for o in self.cursor.options if o.value in self.selection)


def multiselect(
    message: str,
    options: Iterable[Any],
    *,
    initial_values: Iterable[Any] = (),
    required: bool = True,
    max_items: int | None = None,
    cursor_at: Any = None,
    help: str | None = None,
    **prompt_options: Any,
) -> Any:
    """Return the list of chosen values (in option order), or ``CANCEL``."""
    widget = Multiselect(
        message,
        options,
        initial_values=initial_values,
        required=required,
        max_items=max_items,
        cursor_at=cursor_at,
        help=help,
    )
    return Prompt(widget, **prompt_options).run()
