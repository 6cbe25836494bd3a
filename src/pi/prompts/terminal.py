"""Terminal session management and the ANSI vocabulary prompts use.

:class:`TerminalSession` scopes raw mode and cursor visibility around an
interactive prompt.  Whatever happens inside the ``with`` block (submit,
cancel, ``KeyboardInterrupt``) the cursor is shown again and the input
descriptor is returned to cooked mode.
"""

from __future__ import annotations

import atexit
import logging
import sys
import threading
from contextlib import ExitStack
from typing import IO, Any

from pi.prompts.environment import is_tty
from pi.prompts.keys import raw_mode

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# ANSI escape constants
# ---------------------------------------------------------------------------

HIDE_CURSOR = "\x1b[?25l"
SHOW_CURSOR = "\x1b[?25h"
COLUMN_1 = "\x1b[1G"
CLEAR_DOWN = "\x1b[J"
CLEAR_LINE_END = "\x1b[K"
CARRIAGE_RETURN = "\r"
_CURSOR_UP_FMT = "\x1b[{}A"


def cursor_up(lines: int) -> str:
    return _CURSOR_UP_FMT.format(lines) if lines > 0 else ""


# ---------------------------------------------------------------------------
# Process-exit safety net
# ---------------------------------------------------------------------------

_atexit_installed = False
_atexit_lock = threading.Lock()


def _restore_cursor_at_exit() -> None:
    stream = sys.stdout
    if stream is None or not is_tty(stream):
        return
    try:
        stream.write(SHOW_CURSOR)
        stream.flush()
    except (OSError, ValueError):
        pass


def install_exit_handler() -> None:
    """Register the show-cursor ``atexit`` hook once per process."""
    global _atexit_installed
    with _atexit_lock:
        if _atexit_installed:
            return
        atexit.register(_restore_cursor_at_exit)
        _atexit_installed = True


# ---------------------------------------------------------------------------
# TerminalSession
# ---------------------------------------------------------------------------


def _fileno(stream: Any) -> int | None:
    try:
        return stream.fileno()
    except (AttributeError, OSError, ValueError):
        return None


class TerminalSession:
    """Context manager: raw input + hidden cursor, always restored."""

    def __init__(self, input: IO[Any] | None, output: IO[str]) -> None:
        self._input = input
        self._output = output
        self._stack: ExitStack | None = None
        self.raw = False

    def __enter__(self) -> TerminalSession:
        install_exit_handler()
        stack = ExitStack()
        fd = _fileno(self._input) if self._input is not None else None
        if fd is not None and is_tty(fd):
            self.raw = stack.enter_context(raw_mode(fd))
        stack.callback(self.show_cursor)
        self._stack = stack
        self.hide_cursor()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        stack, self._stack = self._stack, None
        if stack is not None:
            stack.close()

    def hide_cursor(self) -> None:
        self.write(HIDE_CURSOR)

    def show_cursor(self) -> None:
        self.write(SHOW_CURSOR)

    def write(self, data: str) -> None:
        try:
            self._output.write(data)
            self._output.flush()
        except (OSError, ValueError) as exc:
            logger.debug("terminal write failed: %s", exc)
