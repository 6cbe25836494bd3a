"""Raw keyboard decoding for terminal prompts.

A :class:`KeyReader` pulls bytes from a file descriptor placed in raw mode
and returns exactly one logical key per call: a single character, a control
character, or a complete escape sequence such as ``"\\x1b[A"``.  A lone
Escape press is told apart from the start of an arrow-key sequence with a
short timed read-ahead.
"""

from __future__ import annotations

import codecs
import logging
import os
import select
import termios
import tty
from contextlib import contextmanager
from typing import Iterator

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Key codes
# ---------------------------------------------------------------------------

ESC = "\x1b"
KEY_ENTER = "\r"
KEY_NEWLINE = "\n"
KEY_SPACE = " "
KEY_TAB = "\t"
KEY_BACKSPACE = "\b"
KEY_DELETE = "\x7f"
KEY_CTRL_C = "\x03"
KEY_CTRL_D = "\x04"
KEY_ESCAPE = ESC

KEY_UP = "\x1b[A"
KEY_DOWN = "\x1b[B"
KEY_RIGHT = "\x1b[C"
KEY_LEFT = "\x1b[D"
KEY_SHIFT_TAB = "\x1b[Z"

# Sequences -> key names
LEGACY_KEY_SEQUENCES: dict[str, str] = {
    "\x1b[A": "up",
    "\x1b[B": "down",
    "\x1b[C": "right",
    "\x1b[D": "left",
    "\x1b[H": "home",
    "\x1b[F": "end",
    "\x1bOA": "up",
    "\x1bOB": "down",
    "\x1bOC": "right",
    "\x1bOD": "left",
    "\x1bOH": "home",
    "\x1bOF": "end",
    "\x1b[1~": "home",
    "\x1b[4~": "end",
    "\x1b[2~": "insert",
    "\x1b[3~": "delete",
    "\x1b[5~": "pageUp",
    "\x1b[6~": "pageDown",
    "\x1b[Z": "shift+tab",
}

CONTROL_KEY_NAMES: dict[str, str] = {
    ESC: "escape",
    KEY_ENTER: "enter",
    KEY_NEWLINE: "enter",
    KEY_TAB: "tab",
    KEY_SPACE: "space",
    KEY_DELETE: "backspace",
    KEY_BACKSPACE: "backspace",
    KEY_CTRL_C: "ctrl+c",
    KEY_CTRL_D: "ctrl+d",
}

# Escape-sequence read-ahead windows (seconds)
ESCAPE_TIMEOUT = 0.05
SEQUENCE_TIMEOUT = 0.01


def parse_key(data: str) -> str | None:
    """Return a human-readable name for a decoded key, or ``None``.

    Printable characters name themselves; control characters map to
    ``"ctrl+<letter>"``; ``ESC <char>`` maps to ``"alt+<char>"``.
    """
    if not data:
        return None
    if data in CONTROL_KEY_NAMES:
        return CONTROL_KEY_NAMES[data]
    if data in LEGACY_KEY_SEQUENCES:
        return LEGACY_KEY_SEQUENCES[data]
    if len(data) == 1:
        code = ord(data)
        if 1 <= code <= 26:
            return f"ctrl+{chr(code + 96)}"
        if code >= 32:
            return data
        return None
    if data.startswith(ESC) and len(data) == 2:
        inner = parse_key(data[1])
        return f"alt+{inner}" if inner else None
    return None


def is_escape_sequence(data: str) -> bool:
    return len(data) > 1 and data.startswith(ESC)


def is_csi_final_byte(char: str) -> bool:
    return 0x40 <= ord(char) <= 0x7E


# ---------------------------------------------------------------------------
# Raw mode
# ---------------------------------------------------------------------------


@contextmanager
def raw_mode(fd: int) -> Iterator[bool]:
    """Put *fd* in raw mode for the duration of the block.

    Yields ``True`` when raw mode was entered, ``False`` when *fd* is not a
    terminal (pipes, files, tests).  Cooked mode is restored on every exit
    path.
    """
    try:
        saved = termios.tcgetattr(fd)
    except (termios.error, OSError, ValueError):
        yield False
        return

    tty.setraw(fd)
    try:
        yield True
    finally:
        try:
            termios.tcsetattr(fd, termios.TCSADRAIN, saved)
        except (termios.error, OSError):
            logger.debug("could not restore terminal attributes on fd %d", fd)


# ---------------------------------------------------------------------------
# KeyReader
# ---------------------------------------------------------------------------


class KeyReader:
    """Decodes one logical key per :meth:`read` call from a raw byte source.

    Parameters
    ----------
    fd:
        File descriptor to read from (usually ``sys.stdin.fileno()``).
    escape_timeout:
        How long to wait after an Escape byte before deciding it was a
        standalone Escape press.
    sequence_timeout:
        Per-byte window while accumulating a CSI sequence.  Terminals that
        split a sequence across writes are tolerated as long as each byte
        arrives within this window.
    """

    def __init__(
        self,
        fd: int,
        *,
        escape_timeout: float = ESCAPE_TIMEOUT,
        sequence_timeout: float = SEQUENCE_TIMEOUT,
    ) -> None:
        self._fd = fd
        self.escape_timeout = escape_timeout
        self.sequence_timeout = sequence_timeout

    @property
    def fd(self) -> int:
        return self._fd

    def read(self) -> str:
        """Block until one key is available and return it.

        Terminal loss (closed descriptor, EOF, read errors) is reported as
        ``KEY_CTRL_C`` so that every prompt cancels cleanly instead of
        raising.
        """
        try:
            return self._read_key()
        except (OSError, ValueError, EOFError) as exc:
            logger.debug("key input unavailable, synthesizing ctrl+c: %s", exc)
            return KEY_CTRL_C

    # -- internals ----------------------------------------------------------

    def _read_key(self) -> str:
        first = self._read_byte()
        if first != 0x1B:
            return self._decode_char(first)

        if not self._wait(self.escape_timeout):
            return ESC

        second = self._read_byte()
        if second == ord("["):
            return ESC + "[" + self._read_csi_tail()
        if second == ord("O") and self._wait(self.escape_timeout):
            return ESC + "O" + self._decode_char(self._read_byte())
        return ESC + self._decode_char(second)

    def _read_csi_tail(self) -> str:
        tail: list[str] = []
        while self._wait(self.sequence_timeout):
            char = chr(self._read_byte())
            tail.append(char)
            if is_csi_final_byte(char):
                break
        return "".join(tail)

    def _decode_char(self, lead: int) -> str:
        """Decode one UTF-8 code point whose first byte is *lead*."""
        if lead < 0x80:
            return chr(lead)
        if lead >= 0xF0:
            extra = 3
        elif lead >= 0xE0:
            extra = 2
        elif lead >= 0xC0:
            extra = 1
        else:
            extra = 0

        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        raw = bytes([lead])
        for _ in range(extra):
            if not self._wait(self.escape_timeout):
                break
            raw += bytes([self._read_byte()])
        return decoder.decode(raw, final=True)

    def _wait(self, timeout: float) -> bool:
        readable, _, _ = select.select([self._fd], [], [], timeout)
        return bool(readable)

    def _read_byte(self) -> int:
        data = os.read(self._fd, 1)
        if not data:
            raise EOFError("input closed")
        return data[0]
