"""Yes/no confirmation."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pi.prompts import colors, symbols
from pi.prompts.prompt import Prompt
from pi.prompts.widgets.base import BaseWidget

if TYPE_CHECKING:
    from pi.prompts.settings import Action


class Confirm(BaseWidget):
    def __init__(
        self,
        message: str,
        *,
        active: str = "Yes",
        inactive: str = "No",
        initial_value: bool = True,
        help: str | None = None,
    ) -> None:
        super().__init__(message, help=help)
        self.active = active
        self.inactive = inactive
        self._initial = initial_value

    def initial_value(self) -> Any:
        return self._initial

    def handle_input(self, prompt: Prompt, key: str, action: Action | None) -> None:
        if action in ("left", "up"):
            prompt.value = True
        elif action in ("right", "down"):
            prompt.value = False
        elif key.lower() == "y":
            prompt.value = True
        elif key.lower() == "n":
            prompt.value = False

    def body_lines(self, prompt: Prompt) -> list[str]:
        def choice(label: str, selected: bool) -> str:
            if selected:
                return f"{colors.green(symbols.RADIO_ACTIVE)} {label}"
            return f"{colors.dim(symbols.RADIO_INACTIVE)} {colors.dim(label)}"

        yes = choice(self.active, bool(prompt.value))
        no = choice(self.inactive, not prompt.value)
        return [f"{yes} {colors.dim('/')} {no}"]

    def final_display(self, prompt: Prompt) -> str:
        return self.active if prompt.value else self.inactive


def confirm(
    message: str,
    *,
    active: str = "Yes",
    inactive: str = "No",
    initial_value: bool = True,
    help: str | None = None,
    **prompt_options: Any,
) -> Any:
    """Ask a yes/no question; returns ``True``, ``False`` or ``CANCEL``."""
    widget = Confirm(
        message, active=active, inactive=inactive, initial_value=initial_value, help=help
    )
    return Prompt(widget, **prompt_options).run()
