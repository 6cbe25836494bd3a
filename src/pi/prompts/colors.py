"""Minimal ANSI color helpers used to style prompt frames.

Colors are decided once at import time from ``stdout`` and the
``NO_COLOR`` / ``FORCE_COLOR`` environment variables.
"""

from __future__ import annotations

from pi.prompts.environment import colors_supported

ENABLED: bool = colors_supported()

_RESET = "\x1b[0m"


def _wrap(text: object, code: str) -> str:
    if not ENABLED:
        return str(text)
    return f"\x1b[{code}m{text}{_RESET}"


def gray(text: object) -> str:
    return _wrap(text, "90")


def cyan(text: object) -> str:
    return _wrap(text, "36")


def green(text: object) -> str:
    return _wrap(text, "32")


def yellow(text: object) -> str:
    return _wrap(text, "33")


def red(text: object) -> str:
    return _wrap(text, "31")


def magenta(text: object) -> str:
    return _wrap(text, "35")


def dim(text: object) -> str:
    return _wrap(text, "2")


def inverse(text: object) -> str:
    return _wrap(text, "7")


def strikethrough(text: object) -> str:
    return _wrap(text, "9")


def hidden(text: object) -> str:
    return _wrap(text, "8")
