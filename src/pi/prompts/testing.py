"""Helpers for driving prompts from tests without a terminal.

Example::

    from pi.prompts import select
    from pi.prompts.testing import simulate

    result = simulate(select, "Pick", ["a", "b", "c"], keys=lambda k: k.down().down().submit())
    assert result == "c"
"""

from __future__ import annotations

import io
from dataclasses import replace
from typing import Any, Callable, Iterable, Union

from pi.prompts import keys as _keys
from pi.prompts.registry import PromptRegistry
from pi.prompts.settings import Settings, get_settings

KEYS: dict[str, str] = {
    "enter": _keys.KEY_ENTER,
    "escape": _keys.KEY_ESCAPE,
    "ctrl_c": _keys.KEY_CTRL_C,
    "ctrl_d": _keys.KEY_CTRL_D,
    "up": _keys.KEY_UP,
    "down": _keys.KEY_DOWN,
    "right": _keys.KEY_RIGHT,
    "left": _keys.KEY_LEFT,
    "backspace": _keys.KEY_DELETE,
    "space": _keys.KEY_SPACE,
    "tab": _keys.KEY_TAB,
    "shift_tab": _keys.KEY_SHIFT_TAB,
}

MAX_READS = 100


class KeySequence:
    """A key source that replays a fixed list of keys.

    Once the list is exhausted it answers Enter, so a prompt waiting for
    confirmation still terminates.  More than *max_reads* reads means the
    prompt is stuck in a loop and raises ``RuntimeError``.
    """

    def __init__(self, keys: Iterable[str], *, max_reads: int = MAX_READS) -> None:
        self._keys = list(keys)
        self.max_reads = max_reads
        self.reads = 0

    def read(self) -> str:
        self.reads += 1
        if self.reads > self.max_reads:
            raise RuntimeError(f"Too many reads ({self.reads}); prompt never terminated")
        if self._keys:
            return self._keys.pop(0)
        return _keys.KEY_ENTER

    @property
    def remaining(self) -> list[str]:
        return list(self._keys)


class PromptDriver:
    """Fluent builder for key sequences."""

    def __init__(self) -> None:
        self.keys: list[str] = []

    def type(self, text: str) -> PromptDriver:
        self.keys.extend(text)
        return self

    def key(self, name_or_key: str) -> PromptDriver:
        self.keys.append(KEYS.get(name_or_key, name_or_key))
        return self

    def submit(self) -> PromptDriver:
        return self.key("enter")

    def cancel(self) -> PromptDriver:
        return self.key("escape")

    def up(self) -> PromptDriver:
        return self.key("up")

    def down(self) -> PromptDriver:
        return self.key("down")

    def left(self) -> PromptDriver:
        return self.key("left")

    def right(self) -> PromptDriver:
        return self.key("right")

    def toggle(self) -> PromptDriver:
        return self.key("space")

    def tab(self) -> PromptDriver:
        return self.key("tab")

    def backspace(self) -> PromptDriver:
        return self.key("backspace")


KeysArg = Union[Iterable[str], Callable[[PromptDriver], Any]]


def _resolve_keys(keys: KeysArg) -> list[str]:
    if callable(keys):
        driver = PromptDriver()
        keys(driver)
        return driver.keys
    return list(keys)


def interactive_settings(base: Settings | None = None) -> Settings:
    """Copy of *base* (default: the global settings) with CI fallback off."""
    config = (base or get_settings()).get()
    return Settings(replace(config, ci_mode=False))


def simulate_with_output(
    prompt_fn: Callable[..., Any],
    *args: Any,
    keys: KeysArg = (),
    **kwargs: Any,
) -> tuple[Any, str]:
    """Run *prompt_fn* against scripted *keys*; return ``(result, output)``."""
    output = io.StringIO()
    kwargs.setdefault("settings", interactive_settings())
    kwargs.setdefault("registry", PromptRegistry())
    result = prompt_fn(
        *args,
        key_reader=KeySequence(_resolve_keys(keys)),
        output=output,
        **kwargs,
    )
    return result, output.getvalue()


def simulate(
    prompt_fn: Callable[..., Any],
    *args: Any,
    keys: KeysArg = (),
    **kwargs: Any,
) -> Any:
    return simulate_with_output(prompt_fn, *args, keys=keys, **kwargs)[0]
