"""Pick an option by pressing its shortcut key."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Iterable, Mapping

from pi.prompts import colors
from pi.prompts.options import Option, normalize_option
from pi.prompts.prompt import Prompt
from pi.prompts.widgets.base import BaseWidget, option_hint

if TYPE_CHECKING:
    from pi.prompts.settings import Action


@dataclass(frozen=True)
class KeyedOption:
    option: Option
    key: str


def normalize_keyed_options(raw: Iterable[Any]) -> list[KeyedOption]:
    """Attach a shortcut to each option: an explicit ``key`` or the label's first letter."""
    keyed: list[KeyedOption] = []
    for item in raw:
        option = normalize_option(item)
        key = item.get("key") if isinstance(item, Mapping) else None
        if not key:
            key = str(option.value)[:1]
        if not key:
            raise ValueError(f"Cannot derive a shortcut key for option {option.label!r}")
        keyed.append(KeyedOption(option, key))
    return keyed


class SelectKey(BaseWidget):
    # Every printable key is a potential shortcut, including j/k/h/l
    captures_text = True

    def __init__(self, message: str, options: Iterable[Any], *, help: str | None = None) -> None:
        super().__init__(message, help=help)
        self.options = normalize_keyed_options(options)
        if not self.options:
            raise ValueError("SelectKey needs at least one option")

    def find(self, key: str) -> KeyedOption | None:
        for keyed in self.options:
            if keyed.key.lower() == key.lower() and not keyed.option.disabled:
                return keyed
        return None

    def handle_input(self, prompt: Prompt, key: str, action: Action | None) -> None:
        keyed = self.find(key)
        if keyed is None:
            return
        prompt.value = keyed.option.value
        prompt.submit()

    def prepare_submit(self, prompt: Prompt) -> bool:
        # Enter alone selects nothing
        return prompt.value is not None

    def body_lines(self, prompt: Prompt) -> list[str]:
        lines = []
        for keyed in self.options:
            label = keyed.option.label
            if keyed.option.disabled:
                lines.append(f"{colors.dim(f'[{keyed.key}]')} {colors.strikethrough(colors.dim(label))}")
                continue
            lines.append(f"{colors.cyan(f'[{keyed.key}]')} {label}{option_hint(keyed.option)}")
        return lines

    def final_display(self, prompt: Prompt) -> str:
        for keyed in self.options:
            if keyed.option.value == prompt.value:
                return keyed.option.label
        return ""


def select_key(
    message: str,
    options: Iterable[Any],
    *,
    help: str | None = None,
    **prompt_options: Any,
) -> Any:
    """Return the value of the option whose key was pressed, or ``CANCEL``."""
    return Prompt(SelectKey(message, options, help=help), **prompt_options).run()
