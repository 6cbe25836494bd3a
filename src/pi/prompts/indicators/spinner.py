"""Spinner with an animated frame and a live message."""

from __future__ import annotations

import re
from typing import IO, Any, Callable, Literal

from pi.prompts.indicators.base import AnimatedIndicator

SpinnerIndicator = Literal["dots", "timer"]

_TRAILING_DOTS_RE = re.compile(r"\.+$")


def format_elapsed(seconds: float) -> str:
    minutes, secs = divmod(int(seconds), 60)
    return f"[{minutes}m {secs}s]" if minutes else f"[{secs}s]"


class Spinner(AnimatedIndicator):
    """Usage::

        spin = Spinner()
        spin.start("Installing")
        ...
        spin.message("Linking")
        spin.stop("Installed")

    ``indicator="dots"`` animates trailing dots after the message (so any
    dots the caller supplies are stripped); ``"timer"`` shows the elapsed
    time instead.
    """

    def __init__(
        self,
        *,
        indicator: SpinnerIndicator = "dots",
        output: IO[str] | None = None,
        frames: tuple[str, ...] | None = None,
        delay: float | None = None,
        style_frame: Callable[[str], str] | None = None,
    ) -> None:
        if indicator not in ("dots", "timer"):
            raise ValueError(f"Unknown spinner indicator: {indicator!r}")
        super().__init__(output=output, frames=frames, delay=delay, style_frame=style_frame)
        self.indicator = indicator

    def format_message(self, message: str) -> str:
        return _TRAILING_DOTS_RE.sub("", message or "")

    def render_line(self, frame: str) -> str:
        if self.indicator == "timer":
            suffix = f" {format_elapsed(self.elapsed())}"
        else:
            suffix = "." * ((self.tick_count // 2) % 4)
        return f"{frame}  {self._message}{suffix}"

    def final_suffix(self) -> str:
        if self.indicator == "timer":
            return f" {format_elapsed(self.elapsed())}"
        return ""

    def clear(self) -> None:
        """Stop and erase the spinner line without printing a final frame."""
        self._clear()


def spinner(**options: Any) -> Spinner:
    return Spinner(**options)
