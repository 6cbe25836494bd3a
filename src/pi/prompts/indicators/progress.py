"""Determinate progress bar."""

from __future__ import annotations

from typing import IO, Any, Callable

from pi.prompts import colors, symbols
from pi.prompts.indicators.base import AnimatedIndicator, FinishState

BAR_WIDTH = 40


class Progress(AnimatedIndicator):
    """A bar plus percentage, repainted by the animation thread.

    ``advance`` and ``update`` only change the counter; the next tick shows
    it.  ``stop`` fills the bar to 100%.
    """

    def __init__(
        self,
        total: int,
        *,
        width: int = BAR_WIDTH,
        output: IO[str] | None = None,
        delay: float | None = None,
        style_frame: Callable[[str], str] | None = None,
    ) -> None:
        if total < 0:
            raise ValueError(f"total must be non-negative, got {total}")
        super().__init__(
            output=output,
            frames=(symbols.STEP_ACTIVE,),
            delay=delay,
            style_frame=style_frame or colors.cyan,
        )
        self.total = total
        self.width = width
        self._current = 0

    @property
    def current(self) -> int:
        with self._lock:
            return self._current

    def advance(self, amount: int = 1) -> Progress:
        with self._lock:
            self._current = max(0, min(self._current + amount, self.total))
        return self

    def update(self, current: int) -> Progress:
        with self._lock:
            self._current = max(0, min(current, self.total))
        return self

    def ratio(self) -> float:
        if self.total == 0:
            return 1.0
        return self._current / self.total

    def bar(self) -> str:
        filled = round(self.ratio() * self.width)
        return "[{}{}]".format(
            colors.green(symbols.PROGRESS_FILLED * filled),
            colors.gray(symbols.PROGRESS_EMPTY * (self.width - filled)),
        )

    def percentage(self) -> str:
        return colors.dim(f"{round(self.ratio() * 100):>3}%")

    def render_line(self, frame: str) -> str:
        line = f"{frame}  {self.bar()} {self.percentage()}"
        return f"{line}  {self._message}" if self._message else line

    def on_finish(self, state: FinishState) -> None:
        if state == "success":
            self._current = self.total


def progress(total: int, **options: Any) -> Progress:
    return Progress(total, **options)
