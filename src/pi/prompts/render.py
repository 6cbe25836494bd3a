"""Differential frame renderer.

A *frame* is the complete text of a prompt, newline separated.  The
renderer remembers the last frame it wrote and repaints in place by moving
the cursor back to the start of that frame, clearing everything below and
printing the new one.  Unchanged frames produce no output at all.
"""

from __future__ import annotations

from typing import IO

from pi.prompts.terminal import CLEAR_DOWN, COLUMN_1, HIDE_CURSOR, cursor_up


class FrameRenderer:
    """Writes frames to *output*, skipping repaints that would change nothing."""

    def __init__(self, output: IO[str]) -> None:
        self._output = output
        self.previous_frame: str | None = None
        self.needs_redraw = False

    def request_redraw(self) -> None:
        """Force the next :meth:`render` to repaint (e.g. after a resize)."""
        self.needs_redraw = True

    def render(self, frame: str, *, force: bool = False) -> bool:
        """Paint *frame*; return ``True`` if anything was written."""
        if frame == self.previous_frame and not (force or self.needs_redraw):
            return False
        self._paint(frame)
        return True

    def finalize(self, frame: str) -> None:
        """Paint the terminal frame unconditionally."""
        self._paint(frame)

    def _paint(self, frame: str) -> None:
        parts: list[str] = []
        if self.previous_frame is None:
            parts.append(HIDE_CURSOR)
        else:
            lines_up = self.previous_frame.count("\n")
            if lines_up:
                parts.append(cursor_up(lines_up))
            parts.append(COLUMN_1)
        parts.append(CLEAR_DOWN)
        parts.append(frame)

        self._output.write("".join(parts))
        self._output.flush()
        self.previous_frame = frame
        self.needs_redraw = False
