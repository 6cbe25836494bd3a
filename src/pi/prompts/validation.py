"""Validation outcomes, built-in validators and value transforms.

A validator is any callable ``(value) -> outcome`` where the outcome is a
:class:`Passed`, :class:`Invalid` or :class:`Warning` instance.  ``None`` is
accepted as shorthand for ``Passed()`` and a plain string as shorthand for
``Invalid(message)``.

Transforms run after validation succeeds and turn raw input into its final
form.  They can be given as callables or by name (``"strip"``, ``"upper"``
...), see :data:`TRANSFORMS`.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from typing import Any, Callable, Container, Iterable, Pattern, Union

# ---------------------------------------------------------------------------
# Outcomes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Passed:
    pass


@dataclass(frozen=True)
class Invalid:
    message: str


@dataclass(frozen=True)
class Warning:  # noqa: A001 - shadows the builtin only inside this module
    message: str


ValidationOutcome = Union[Passed, Invalid, Warning]
Validator = Callable[[Any], Union[ValidationOutcome, str, None]]
Transform = Callable[[Any], Any]

PASSED = Passed()


def run_validator(validator: Validator | None, value: Any) -> ValidationOutcome:
    """Call *validator* and normalize its return value to an outcome."""
    if validator is None:
        return PASSED
    result = validator(value)
    if result is None:
        return PASSED
    if isinstance(result, str):
        return Invalid(result)
    if isinstance(result, (Passed, Invalid, Warning)):
        return result
    raise TypeError(f"Validator returned unsupported value: {result!r}")


# ---------------------------------------------------------------------------
# Validators
# ---------------------------------------------------------------------------


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def required(message: str = "This field is required") -> Validator:
    def check(value: Any) -> str | None:
        if isinstance(value, (list, tuple, set)):
            return message if not value else None
        return message if not _text(value).strip() else None

    return check


def min_length(length: int, message: str | None = None) -> Validator:
    msg = message or f"Must be at least {length} characters"
    return lambda value: msg if len(_text(value)) < length else None


def max_length(length: int, message: str | None = None) -> Validator:
    msg = message or f"Must be at most {length} characters"
    return lambda value: msg if len(_text(value)) > length else None


def matches(pattern: str | Pattern[str], message: str = "Invalid format") -> Validator:
    compiled = re.compile(pattern) if isinstance(pattern, str) else pattern
    return lambda value: None if compiled.search(_text(value)) else message


def one_of(allowed: Iterable[Any], message: str | None = None) -> Validator:
    choices = list(allowed)
    msg = message or f"Must be one of: {', '.join(str(c) for c in choices)}"
    return lambda value: None if value in choices else msg


_INTEGER_RE = re.compile(r"^-?\d+$")


def integer(message: str = "Must be a number") -> Validator:
    return lambda value: None if _INTEGER_RE.match(_text(value)) else message


def in_range(low: int, high: int, message: str | None = None) -> Validator:
    """Integer text between *low* and *high* inclusive."""
    msg = message or f"Must be between {low} and {high}"

    def check(value: Any) -> str | None:
        text = _text(value)
        if not _INTEGER_RE.match(text):
            return msg
        return None if low <= int(text) <= high else msg

    return check


def combine(*validators: Validator) -> Validator:
    """Run *validators* in order and return the first non-passing outcome."""

    def check(value: Any) -> ValidationOutcome:
        for validator in validators:
            outcome = run_validator(validator, value)
            if not isinstance(outcome, Passed):
                return outcome
        return PASSED

    return check


def email(message: str = "Must be a valid email address") -> Validator:
    return matches(r"^[^@\s]+@[^@\s]+\.[^@\s]+$", message)


def url(message: str = "Must be a valid URL") -> Validator:
    return matches(r"^https?://\S+$", message)


def path_exists(message: str = "Path does not exist") -> Validator:
    return lambda value: None if os.path.exists(_text(value)) else message


def directory_exists(message: str = "Directory does not exist") -> Validator:
    return lambda value: None if os.path.isdir(_text(value)) else message


def warn_if(predicate: Callable[[Any], bool], message: str) -> Validator:
    """Soft validator: a :class:`Warning` the user may confirm past."""
    return lambda value: Warning(message) if predicate(value) else None


def warn_unless_in(allowed: Container[Any], message: str) -> Validator:
    return warn_if(lambda value: value not in allowed, message)


# ---------------------------------------------------------------------------
# Transforms
# ---------------------------------------------------------------------------


def _titlecase(value: Any) -> str:
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), _text(value))


def _to_integer(value: Any) -> int:
    return int(_text(value).strip())


def _to_float(value: Any) -> float:
    return float(_text(value).strip())


TRANSFORMS: dict[str, Transform] = {
    "strip": lambda value: _text(value).strip(),
    "lower": lambda value: _text(value).lower(),
    "upper": lambda value: _text(value).upper(),
    "capitalize": lambda value: _text(value).capitalize(),
    "titlecase": _titlecase,
    "squish": lambda value: re.sub(r"\s+", " ", _text(value).strip()),
    "compact": lambda value: re.sub(r"\s+", "", _text(value)),
    "to_integer": _to_integer,
    "to_float": _to_float,
    "digits_only": lambda value: re.sub(r"\D", "", _text(value)),
}
TRANSFORMS["trim"] = TRANSFORMS["strip"]
TRANSFORMS["downcase"] = TRANSFORMS["lower"]
TRANSFORMS["upcase"] = TRANSFORMS["upper"]


def resolve_transform(transform: str | Transform | None) -> Transform | None:
    """Return a callable for *transform*, looking names up in :data:`TRANSFORMS`."""
    if transform is None:
        return None
    if isinstance(transform, str):
        try:
            return TRANSFORMS[transform]
        except KeyError:
            raise ValueError(f"Unknown transform: {transform!r}") from None
    if callable(transform):
        return transform
    raise ValueError(f"Transform must be a name or callable, got {type(transform).__name__}")


def chain(*transforms: str | Transform) -> Transform:
    """Compose *transforms*, applied left to right."""
    resolved = [resolve_transform(t) for t in transforms]

    def apply(value: Any) -> Any:
        for fn in resolved:
            if fn is not None:
                value = fn(value)
        return value

    return apply
