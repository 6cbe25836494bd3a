"""Masked text entry."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pi.prompts import symbols
from pi.prompts.prompt import Prompt
from pi.prompts.utils import grapheme_count
from pi.prompts.widgets.base import BaseWidget
from pi.prompts.widgets.text import TextBuffer, is_arrow

if TYPE_CHECKING:
    from pi.prompts.settings import Action


class Password(BaseWidget):
    """Like :class:`~pi.prompts.widgets.text.Text` but never echoes the input.

    One mask glyph is shown per grapheme, so the displayed length matches
    what the user typed even for emoji and combining sequences.
    """

    captures_text = True

    def __init__(self, message: str, *, mask: str | None = None, help: str | None = None) -> None:
        super().__init__(message, help=help)
        self.mask = mask or symbols.PASSWORD_MASK
        self.buffer = TextBuffer()

    def initial_value(self) -> Any:
        return ""

    def handle_input(self, prompt: Prompt, key: str, action: Action | None) -> None:
        if is_arrow(key) and action == "left":
            self.buffer.left()
        elif is_arrow(key) and action == "right":
            self.buffer.right()
        elif self.buffer.edit(key):
            prompt.value = self.buffer.text
        prompt.cursor = self.buffer.cursor

    def body_lines(self, prompt: Prompt) -> list[str]:
        return [self.buffer.display(mask=lambda _: self.mask)]

    def final_display(self, prompt: Prompt) -> str:
        return self.mask * grapheme_count(self.buffer.text)


def password(
    message: str,
    *,
    mask: str | None = None,
    help: str | None = None,
    **prompt_options: Any,
) -> Any:
    """Ask for a secret; returns the string or ``CANCEL``."""
    return Prompt(Password(message, mask=mask, help=help), **prompt_options).run()
