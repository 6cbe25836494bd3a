"""Glyphs used by prompt frames, with ASCII fallbacks."""

from __future__ import annotations

from pi.prompts.environment import unicode_supported

UNICODE: bool = unicode_supported()


def _s(fancy: str, plain: str) -> str:
    return fancy if UNICODE else plain


# Step indicators
STEP_ACTIVE = _s("◆", "*")
STEP_CANCEL = _s("■", "x")
STEP_ERROR = _s("▲", "x")
STEP_WARNING = _s("▲", "!")
STEP_SUBMIT = _s("◇", "o")

# Radio buttons
RADIO_ACTIVE = _s("●", ">")
RADIO_INACTIVE = _s("○", " ")

# Checkboxes
CHECKBOX_ACTIVE = _s("◻", "[•]")
CHECKBOX_SELECTED = _s("◼", "[+]")
CHECKBOX_INACTIVE = _s("◻", "[ ]")

# Password mask
PASSWORD_MASK = _s("▪", "*")

# Bars
BAR = _s("│", "|")
BAR_START = _s("┌", "+")
BAR_END = _s("└", "+")

# Progress bar
PROGRESS_FILLED = _s("█", "#")
PROGRESS_EMPTY = _s("░", "-")

# Spinner
SPINNER_FRAMES: tuple[str, ...] = ("◒", "◐", "◓", "◑") if UNICODE else ("•", "o", "O", "0")
SPINNER_DELAY: float = 0.08 if UNICODE else 0.12
