"""Process-wide prompt settings and the key-to-action mapper.

Keys decoded by :mod:`pi.prompts.keys` are mapped to a small vocabulary of
abstract actions that widgets react to.  User aliases are merged over the
defaults, so remapping ``"w"`` to ``"up"`` keeps the arrow keys working.
"""

from __future__ import annotations

import os
import threading
from copy import deepcopy
from dataclasses import dataclass, field
from typing import Literal, Union

Action = Literal["up", "down", "left", "right", "space", "enter", "cancel"]

ACTIONS: tuple[Action, ...] = ("up", "down", "left", "right", "space", "enter", "cancel")

CiMode = Union[bool, Literal["auto"]]

DEFAULT_ALIASES: dict[str, Action] = {
    # Vim-style navigation
    "k": "up",
    "j": "down",
    "h": "left",
    "l": "right",
    # Arrow keys (CSI and SS3 forms)
    "\x1b[A": "up",
    "\x1b[B": "down",
    "\x1b[C": "right",
    "\x1b[D": "left",
    "\x1bOA": "up",
    "\x1bOB": "down",
    "\x1bOC": "right",
    "\x1bOD": "left",
    # Submission / toggling
    "\r": "enter",
    "\n": "enter",
    " ": "space",
    # Cancellation
    "\x1b": "cancel",
    "\x03": "cancel",
}


def _ci_mode_from_env() -> CiMode:
    raw = os.environ.get("PI_PROMPTS_CI", "auto").strip().lower()
    if raw in ("1", "true", "yes", "on"):
        return True
    if raw in ("0", "false", "no", "off"):
        return False
    return "auto"


def _check_ci_mode(value: object) -> CiMode:
    if value is True or value is False or value == "auto":
        return value  # type: ignore[return-value]
    raise ValueError(f"ci_mode must be True, False or 'auto', got {value!r}")


# --- Settings schema ---


@dataclass
class SettingsConfig:
    """Snapshot of the active settings."""

    aliases: dict[str, Action] = field(default_factory=lambda: dict(DEFAULT_ALIASES))
    with_guide: bool = True
    ci_mode: CiMode = field(default_factory=_ci_mode_from_env)


class Settings:
    """Thread-safe holder for :class:`SettingsConfig`."""

    def __init__(self, config: SettingsConfig | None = None) -> None:
        self._lock = threading.Lock()
        self._config = config or SettingsConfig()

    def get(self) -> SettingsConfig:
        """Return a copy of the current configuration."""
        with self._lock:
            return deepcopy(self._config)

    def update(
        self,
        *,
        aliases: dict[str, str] | None = None,
        with_guide: bool | None = None,
        ci_mode: CiMode | None = None,
    ) -> SettingsConfig:
        """Apply the given overrides and return the new configuration.

        *aliases* are merged over the defaults (not over earlier user
        aliases) and every target must be a known action.
        """
        if aliases is not None:
            unknown = sorted({a for a in aliases.values() if a not in ACTIONS})
            if unknown:
                raise ValueError(f"Unknown action(s) in aliases: {', '.join(unknown)}")
        if ci_mode is not None:
            ci_mode = _check_ci_mode(ci_mode)

        with self._lock:
            if aliases is not None:
                merged: dict[str, Action] = dict(DEFAULT_ALIASES)
                merged.update(aliases)  # type: ignore[arg-type]
                self._config.aliases = merged
            if with_guide is not None:
                self._config.with_guide = with_guide
            if ci_mode is not None:
                self._config.ci_mode = ci_mode
            return deepcopy(self._config)

    def reset(self) -> None:
        with self._lock:
            self._config = SettingsConfig()

    def action(self, key: str) -> Action | None:
        """Map a decoded key to its action, or ``None``."""
        with self._lock:
            return self._config.aliases.get(key)

    @property
    def with_guide(self) -> bool:
        with self._lock:
            return self._config.with_guide

    @property
    def ci_mode(self) -> CiMode:
        with self._lock:
            return self._config.ci_mode


def is_printable(key: str) -> bool:
    """Single characters at or above space, excluding DEL."""
    return len(key) == 1 and ord(key) >= 32 and key != "\x7f"


def is_backspace(key: str) -> bool:
    return key in ("\b", "\x7f")


# --- Global instance ---

_global_settings: Settings | None = None
_global_lock = threading.Lock()


def get_settings() -> Settings:
    global _global_settings
    with _global_lock:
        if _global_settings is None:
            _global_settings = Settings()
        return _global_settings


def set_settings(settings: Settings) -> None:
    global _global_settings
    with _global_lock:
        _global_settings = settings


def update_settings(
    *,
    aliases: dict[str, str] | None = None,
    with_guide: bool | None = None,
    ci_mode: CiMode | None = None,
) -> SettingsConfig:
    return get_settings().update(aliases=aliases, with_guide=with_guide, ci_mode=ci_mode)


def reset_settings() -> None:
    get_settings().reset()
