"""Registry of prompts currently running, used to broadcast redraws.

Terminal resizes arrive as ``SIGWINCH``.  The signal disposition is
process-wide, so one module-level handler broadcasts to every registry that
has asked for resize redraws.  Python runs signal handlers on the main
thread between bytecodes, possibly while that same thread holds a registry
lock inside :meth:`PromptRegistry.track`, so the locks are re-entrant.
"""

from __future__ import annotations

import logging
import signal
import threading
import weakref
from contextlib import contextmanager
from typing import Any, Iterator, Protocol

logger = logging.getLogger(__name__)


class Redrawable(Protocol):
    def request_redraw(self) -> None: ...


class PromptRegistry:
    """Thread-safe set of active prompts."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._active: list[Redrawable] = []

    @property
    def active(self) -> list[Redrawable]:
        with self._lock:
            return list(self._active)

    def register(self, prompt: Redrawable) -> None:
        with self._lock:
            self._active.append(prompt)

    def unregister(self, prompt: Redrawable) -> None:
        with self._lock:
            try:
                self._active.remove(prompt)
            except ValueError:
                pass

    @contextmanager
    def track(self, prompt: Redrawable) -> Iterator[Redrawable]:
        """Keep *prompt* registered for the duration of the block."""
        self.install_resize_handler()
        self.register(prompt)
        try:
            yield prompt
        finally:
            self.unregister(prompt)

    def request_redraw(self) -> None:
        """Ask every active prompt to repaint on its next render."""
        for prompt in self.active:
            prompt.request_redraw()

    # -- SIGWINCH -------------------------------------------------------------

    def install_resize_handler(self) -> bool:
        """Route ``SIGWINCH`` to :meth:`request_redraw`.

        Only possible from the main thread on platforms that have
        ``SIGWINCH``; elsewhere resize redraws are simply unavailable.
        A handler installed by other code in the meantime is replaced.
        """
        with _resize_lock:
            _resize_registries.add(self)
            sigwinch = getattr(signal, "SIGWINCH", None)
            if sigwinch is None:
                logger.debug("SIGWINCH unavailable; resize redraws disabled")
                return False
            if signal.getsignal(sigwinch) is _on_sigwinch:
                return True
            try:
                signal.signal(sigwinch, _on_sigwinch)
            except ValueError:
                # Not the main thread
                logger.debug("cannot install SIGWINCH handler off the main thread")
                return False
            return True


_resize_lock = threading.RLock()
_resize_registries: weakref.WeakSet[PromptRegistry] = weakref.WeakSet()


def _on_sigwinch(signum: int, frame: Any) -> None:
    for registry in list(_resize_registries):
        registry.request_redraw()


_default_registry: PromptRegistry | None = None
_default_lock = threading.Lock()


def default_registry() -> PromptRegistry:
    global _default_registry
    with _default_lock:
        if _default_registry is None:
            _default_registry = PromptRegistry()
        return _default_registry
