"""Animated single-line indicators driven by a background thread.

One daemon thread per started indicator repaints the current line every
``delay`` seconds.  All mutable state is guarded by a single lock; the
caller thread only swaps fields (message, progress) and never writes while
the animation runs.  Stopping joins the thread *outside* the lock, then
writes exactly one final line.
"""

from __future__ import annotations

import logging
import sys
import threading
import time
from typing import IO, Callable, Literal

from pi.prompts import colors, symbols
from pi.prompts.terminal import (
    CARRIAGE_RETURN,
    CLEAR_LINE_END,
    HIDE_CURSOR,
    SHOW_CURSOR,
    install_exit_handler,
)

logger = logging.getLogger(__name__)

FinishState = Literal["success", "error", "cancel"]


class AnimatedIndicator:
    """Base class for :class:`Spinner` and :class:`Progress`.

    Subclasses implement :meth:`render_line`, called with the lock held.
    """

    def __init__(
        self,
        *,
        output: IO[str] | None = None,
        frames: tuple[str, ...] | None = None,
        delay: float | None = None,
        style_frame: Callable[[str], str] | None = None,
    ) -> None:
        self._output = output if output is not None else sys.stdout
        self.frames = frames or symbols.SPINNER_FRAMES
        self.delay = delay if delay is not None else symbols.SPINNER_DELAY
        self.style_frame = style_frame or colors.magenta

        self._lock = threading.Lock()
        self._thread: threading.Thread | None = None
        self._wake = threading.Event()
        self._running = False
        self._finished = False
        self._cancelled = False
        self._message = ""
        self._previous_line: str | None = None
        self._start_time = time.monotonic()
        self.frame_index = 0
        self.tick_count = 0

    # -- state ----------------------------------------------------------------

    @property
    def running(self) -> bool:
        with self._lock:
            return self._running

    @property
    def finished(self) -> bool:
        with self._lock:
            return self._finished

    @property
    def cancelled(self) -> bool:
        with self._lock:
            return self._cancelled

    @property
    def current_message(self) -> str:
        with self._lock:
            return self._message

    # -- lifecycle ------------------------------------------------------------

    def start(self, message: str = "") -> AnimatedIndicator:
        install_exit_handler()
        with self._lock:
            if self._running:
                return self
            self._running = True
            self._finished = False
            self._cancelled = False
            self._message = self.format_message(message)
            self._previous_line = None
            self._start_time = time.monotonic()
            self.frame_index = 0
            self.tick_count = 0
            self._wake = threading.Event()
            self._write(f"{HIDE_CURSOR}{colors.gray(symbols.BAR)}\n")
            # Started under the lock so stop() never sees an unstarted thread
            self._thread = threading.Thread(
                target=self._animate, name=type(self).__name__.lower(), daemon=True
            )
            self._thread.start()
        logger.debug("%s started", type(self).__name__)
        return self

    def message(self, message: str) -> None:
        """Replace the message; visible on the next tick."""
        with self._lock:
            self._message = self.format_message(message)

    def stop(self, message: str | None = None) -> None:
        self._finish("success", message)

    def error(self, message: str | None = None) -> None:
        self._finish("error", message)

    def cancel(self, message: str | None = None) -> None:
        self._finish("cancel", message)

    # -- hooks ----------------------------------------------------------------

    def format_message(self, message: str) -> str:
        return message

    def render_line(self, frame: str) -> str:
        raise NotImplementedError

    def final_suffix(self) -> str:
        return ""

    def on_finish(self, state: FinishState) -> None:
        """Adjust state before the final line is built (lock held)."""

    # -- internals ------------------------------------------------------------

    def _animate(self) -> None:
        while True:
            with self._lock:
                if not self._running:
                    return
                frame = self.style_frame(self.frames[self.frame_index])
                line = self.render_line(frame)
                self.frame_index = (self.frame_index + 1) % len(self.frames)
                self.tick_count += 1
                if line != self._previous_line:
                    self._write(f"{CARRIAGE_RETURN}{CLEAR_LINE_END}{line}")
                    self._previous_line = line
                wake = self._wake
            wake.wait(self.delay)

    def _finish(self, state: FinishState, message: str | None) -> None:
        with self._lock:
            if self._finished:
                return
            self._finished = True
            self._running = False
            if state == "cancel":
                self._cancelled = True
            self.on_finish(state)
            text = self.format_message(message) if message is not None else self._message
            text += self.final_suffix()
            thread, self._thread = self._thread, None
            self._wake.set()

        if thread is not None and thread is not threading.current_thread():
            thread.join()

        symbol = _FINAL_SYMBOLS[state]()
        self._write(f"{CARRIAGE_RETURN}{CLEAR_LINE_END}{symbol}  {text}\n{SHOW_CURSOR}")
        logger.debug("%s finished: %s", type(self).__name__, state)

    def _clear(self) -> None:
        """Stop without a final line and erase the animated one."""
        with self._lock:
            if self._finished:
                return
            self._finished = True
            self._running = False
            thread, self._thread = self._thread, None
            self._wake.set()
        if thread is not None and thread is not threading.current_thread():
            thread.join()
        self._write(f"{CARRIAGE_RETURN}{CLEAR_LINE_END}{SHOW_CURSOR}")

    def _write(self, data: str) -> None:
        try:
            self._output.write(data)
            self._output.flush()
        except (OSError, ValueError) as exc:
            logger.debug("indicator write failed: %s", exc)

    def elapsed(self) -> float:
        return time.monotonic() - self._start_time


_FINAL_SYMBOLS: dict[FinishState, Callable[[], str]] = {
    "success": lambda: colors.green(symbols.STEP_SUBMIT),
    "error": lambda: colors.red(symbols.STEP_ERROR),
    "cancel": lambda: colors.red(symbols.STEP_CANCEL),
}
