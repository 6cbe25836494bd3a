"""Type-to-filter selection."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Iterable

from pi.prompts import colors, symbols
from pi.prompts.fuzzy import fuzzy_filter
from pi.prompts.options import Option, move_selection, normalize_options, scroll_into_view
from pi.prompts.prompt import Prompt
from pi.prompts.widgets.base import BaseWidget, option_hint
from pi.prompts.widgets.text import TextBuffer

if TYPE_CHECKING:
    from pi.prompts.settings import Action

OptionFilter = Callable[[Option, str], bool]

NO_MATCH_MESSAGE = "No matching option"


class Autocomplete(BaseWidget):
    """Filters options fuzzily as the user types.

    The typed query lives in the widget; the prompt value is only set to
    the highlighted option's value when the user submits.  A custom
    *filter* ``(option, query) -> bool`` replaces fuzzy ranking and keeps
    the original option order.
    """

    captures_text = True

    def __init__(
        self,
        message: str,
        options: Iterable[Any],
        *,
        max_items: int = 5,
        placeholder: str | None = None,
        filter: OptionFilter | None = None,
        help: str | None = None,
    ) -> None:
        super().__init__(message, help=help)
        self.options = normalize_options(options)
        self.max_items = max_items
        self.placeholder = placeholder
        self.filter = filter
        self.query = TextBuffer()
        self.selected = 0
        self.scroll_offset = 0
        self.filtered = self._filter()

    def _filter(self) -> list[Option]:
        if self.filter is not None:
            return [o for o in self.options if self.filter(o, self.query.text)]
        return fuzzy_filter(self.options, self.query.text)

    @property
    def highlighted(self) -> Option | None:
        if not self.filtered:
            return None
        return self.filtered[self.selected]

    def handle_input(self, prompt: Prompt, key: str, action: Action | None) -> None:
        if action in ("up", "down"):
            delta = -1 if action == "up" else 1
            self.selected = move_selection(self.selected, delta, len(self.filtered))
            self.scroll_offset = scroll_into_view(
                self.selected, self.scroll_offset, self.max_items, len(self.filtered)
            )
            prompt.cursor = self.selected
            return

        if self.query.edit(key):
            self.filtered = self._filter()
            self.selected = 0
            self.scroll_offset = 0
            prompt.cursor = self.query.cursor

    def prepare_submit(self, prompt: Prompt) -> bool:
        option = self.highlighted
        if option is None:
            prompt.fail(NO_MATCH_MESSAGE)
            return False
        if option.disabled:
            return False
        prompt.value = option.value
        return True

    def body_lines(self, prompt: Prompt) -> list[str]:
        lines = [self.query.display(self.placeholder)]
        end = self.scroll_offset + self.max_items
        for index in range(self.scroll_offset, min(end, len(self.filtered))):
            option = self.filtered[index]
            lines.append(self.fit(prompt, self.option_line(option, index == self.selected)))
        if not self.filtered and self.query.text:
            lines.append(colors.dim(NO_MATCH_MESSAGE))
        return lines

    def option_line(self, option: Option, active: bool) -> str:
        if option.disabled:
            return f"{colors.dim(symbols.RADIO_INACTIVE)} {colors.strikethrough(colors.dim(option.label))}"
        if active:
            return f"{colors.green(symbols.RADIO_ACTIVE)} {option.label}{option_hint(option)}"
        return f"{colors.dim(symbols.RADIO_INACTIVE)} {colors.dim(option.label)}"

    def final_display(self, prompt: Prompt) -> str:
        option = self.highlighted
        return option.label if option is not None else self.query.text


def autocomplete(
    message: str,
    options: Iterable[Any],
    *,
    max_items: int = 5,
    placeholder: str | None = None,
    filter: OptionFilter | None = None,
    help: str | None = None,
    **prompt_options: Any,
) -> Any:
    """Return the value of the option picked from the filtered list, or ``CANCEL``."""
    widget = Autocomplete(
        message,
        options,
        max_items=max_items,
        placeholder=placeholder,
        filter=filter,
        help=help,
    )
    return Prompt(widget, **prompt_options).run()
