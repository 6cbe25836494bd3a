"""Environment detection: TTYs, CI runners, terminal capabilities."""

from __future__ import annotations

import os
import sys
from typing import IO, Any

# Environment variables that indicate a CI runner when present
_CI_PRESENCE_VARS = (
    "BUILD_NUMBER",
    "GITHUB_ACTIONS",
    "GITLAB_CI",
    "CIRCLECI",
    "TRAVIS",
    "JENKINS_URL",
    "TEAMCITY_VERSION",
    "BUILDKITE",
)


def is_ci() -> bool:
    """Return ``True`` when running under a known CI system."""
    if os.environ.get("CI") == "true":
        return True
    if os.environ.get("CONTINUOUS_INTEGRATION") == "true":
        return True
    return any(name in os.environ for name in _CI_PRESENCE_VARS)


def is_tty(stream: IO[Any] | int | None) -> bool:
    """Return ``True`` if *stream* (a file object or fd) is a terminal."""
    if stream is None:
        return False
    try:
        if isinstance(stream, int):
            return os.isatty(stream)
        return bool(stream.isatty())
    except (AttributeError, OSError, ValueError):
        return False


def is_dumb_terminal() -> bool:
    return os.environ.get("TERM") == "dumb"


def colors_supported(stream: IO[Any] | None = None) -> bool:
    """``NO_COLOR`` wins, then ``FORCE_COLOR``, then TTY detection."""
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("FORCE_COLOR"):
        return True
    if is_dumb_terminal():
        return False
    return is_tty(stream if stream is not None else sys.stdout)


def unicode_supported(stream: IO[Any] | None = None) -> bool:
    if is_dumb_terminal() or os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("FORCE_COLOR"):
        return True
    return is_tty(stream if stream is not None else sys.stdout)


def columns(stream: IO[Any] | None = None, default: int = 80) -> int:
    """Return the terminal width for *stream*, or *default* off a TTY."""
    target = stream if stream is not None else sys.stdout
    try:
        return os.get_terminal_size(target.fileno()).columns or default
    except (AttributeError, ValueError, OSError):
        return default
