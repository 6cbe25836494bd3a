"""Single-line text entry."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable

from pi.prompts import colors
from pi.prompts.prompt import Prompt
from pi.prompts.settings import is_backspace, is_printable
from pi.prompts.utils import graphemes
from pi.prompts.widgets.base import BaseWidget

if TYPE_CHECKING:
    from pi.prompts.settings import Action


class TextBuffer:
    """Editable string with a grapheme-indexed cursor."""

    def __init__(self, text: str = "") -> None:
        self.text = text
        self.cursor = len(graphemes(text))

    def insert(self, char: str) -> None:
        chars = graphemes(self.text)
        chars.insert(self.cursor, char)
        self.text = "".join(chars)
        self.cursor += 1

    def backspace(self) -> bool:
        if self.cursor == 0:
            return False
        chars = graphemes(self.text)
        del chars[self.cursor - 1]
        self.text = "".join(chars)
        self.cursor -= 1
        return True

    def left(self) -> None:
        self.cursor = max(self.cursor - 1, 0)

    def right(self) -> None:
        self.cursor = min(self.cursor + 1, len(graphemes(self.text)))

    def edit(self, key: str) -> bool:
        """Apply a backspace or printable key; ``True`` if the text changed."""
        if is_backspace(key):
            return self.backspace()
        if is_printable(key):
            self.insert(key)
            return True
        return False

    def display(
        self,
        placeholder: str | None = None,
        mask: Callable[[str], str] | None = None,
    ) -> str:
        """Render the text with an inverse-video cursor cell."""
        if not self.text:
            if not placeholder:
                return colors.inverse(" ")
            chars = graphemes(placeholder)
            return colors.inverse(chars[0]) + colors.dim("".join(chars[1:]))

        chars = graphemes(self.text)
        if mask is not None:
            chars = [mask(c) for c in chars]
        if self.cursor >= len(chars):
            return "".join(chars) + colors.inverse(" ")
        before = "".join(chars[: self.cursor])
        after = "".join(chars[self.cursor + 1 :])
        return before + colors.inverse(chars[self.cursor]) + after


def is_arrow(key: str) -> bool:
    return key.startswith("\x1b[") or key.startswith("\x1bO")


class Text(BaseWidget):
    captures_text = True

    def __init__(
        self,
        message: str,
        *,
        placeholder: str | None = None,
        default_value: str | None = None,
        initial_value: str = "",
        help: str | None = None,
    ) -> None:
        super().__init__(message, help=help)
        self.placeholder = placeholder
        self.default_value = default_value
        self.buffer = TextBuffer(initial_value or "")

    def initial_value(self) -> Any:
        return self.buffer.text

    def handle_input(self, prompt: Prompt, key: str, action: Action | None) -> None:
        # Vim letters are text here; only real arrow keys move the cursor
        if is_arrow(key) and action == "left":
            self.buffer.left()
        elif is_arrow(key) and action == "right":
            self.buffer.right()
        elif self.buffer.edit(key):
            prompt.value = self.buffer.text
        prompt.cursor = self.buffer.cursor

    def prepare_submit(self, prompt: Prompt) -> bool:
        if not prompt.value and self.default_value is not None:
            prompt.value = self.default_value
        return True

    def body_lines(self, prompt: Prompt) -> list[str]:
        return [self.buffer.display(self.placeholder)]


def text(
    message: str,
    *,
    placeholder: str | None = None,
    default_value: str | None = None,
    initial_value: str = "",
    help: str | None = None,
    **prompt_options: Any,
) -> Any:
    """Ask for a line of text; returns the string or ``CANCEL``."""
    widget = Text(
        message,
        placeholder=placeholder,
        default_value=default_value,
        initial_value=initial_value,
        help=help,
    )
    return Prompt(widget, **prompt_options).run()
