"""Option lists with keyboard navigation.

:class:`OptionCursor` keeps a cursor over a list of :class:`Option` items,
skipping disabled entries and wrapping at both ends, and maintains a
scrolling viewport that moves only as far as needed to keep the cursor
visible.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Sequence


@dataclass(frozen=True)
class Option:
    value: Any
    label: str = ""
    hint: str | None = None
    disabled: bool = False

    def __post_init__(self) -> None:
        if not self.label:
            object.__setattr__(self, "label", str(self.value))


def normalize_option(raw: Any) -> Option:
    """Coerce a single option description into an :class:`Option`.

    Accepts an ``Option``, a mapping with ``value`` / ``label`` / ``hint`` /
    ``disabled`` keys, or any scalar (used as both value and label).
    """
    if isinstance(raw, Option):
        return raw
    if isinstance(raw, Mapping):
        if "value" not in raw:
            raise ValueError(f"Option mapping needs a 'value' key: {raw!r}")
        return Option(
            value=raw["value"],
            label=str(raw.get("label") or raw["value"]),
            hint=raw.get("hint"),
            disabled=bool(raw.get("disabled", False)),
        )
    return Option(value=raw, label=str(raw))


def normalize_options(raw: Iterable[Any]) -> list[Option]:
    return [normalize_option(item) for item in raw]


def scroll_into_view(index: int, offset: int, max_items: int | None, length: int) -> int:
    """Return the new scroll offset that keeps *index* visible.

    Scrolls minimally: the offset only changes when *index* falls outside
    ``[offset, offset + max_items)``.
    """
    if max_items is None or max_items <= 0 or length <= max_items:
        return 0
    if index < offset:
        offset = index
    elif index >= offset + max_items:
        offset = index - max_items + 1
    return max(0, min(offset, length - max_items))


def move_selection(index: int, delta: int, length: int) -> int:
    """Wrap *index* by *delta* over a list of *length* items."""
    if length <= 0:
        return 0
    return (index + delta) % length


def find_enabled(options: Sequence[Option], start: int, delta: int) -> int:
    """Return the next non-disabled index from *start* in direction *delta*.

    Wraps modulo the list length.  When every other option is disabled the
    starting index is returned unchanged.
    """
    length = len(options)
    if length == 0:
        return 0
    step = 1 if delta >= 0 else -1
    index = start
    for _ in range(length):
        index = (index + step) % length
        if not options[index].disabled:
            return index
    return start


class OptionCursor:
    """Cursor + viewport over a fixed list of options."""

    def __init__(
        self,
        options: Sequence[Option],
        *,
        max_items: int | None = None,
        initial_value: Any = None,
    ) -> None:
        self.options: list[Option] = list(options)
        self.max_items = max_items
        self.index = self._initial_index(initial_value)
        self.scroll_offset = 0
        self._scroll()

    def _initial_index(self, initial_value: Any) -> int:
        if initial_value is not None:
            for i, option in enumerate(self.options):
                if option.value == initial_value and not option.disabled:
                    return i
        for i, option in enumerate(self.options):
            if not option.disabled:
                return i
        return 0

    def _scroll(self) -> None:
        self.scroll_offset = scroll_into_view(
            self.index, self.scroll_offset, self.max_items, len(self.options)
        )

    @property
    def current(self) -> Option | None:
        if not self.options:
            return None
        return self.options[self.index]

    def move(self, delta: int) -> int:
        """Move by one enabled option in the direction of *delta*."""
        self.index = find_enabled(self.options, self.index, delta)
        self._scroll()
        return self.index

    def move_to(self, index: int) -> None:
        if 0 <= index < len(self.options):
            self.index = index
            self._scroll()

    def visible(self) -> list[tuple[int, Option]]:
        """Return the ``(index, option)`` pairs inside the viewport."""
        if self.max_items is None or len(self.options) <= self.max_items:
            return list(enumerate(self.options))
        end = self.scroll_offset + self.max_items
        return [(i, self.options[i]) for i in range(self.scroll_offset, end)]

    @property
    def has_more_above(self) -> bool:
        return self.scroll_offset > 0

    @property
    def has_more_below(self) -> bool:
        if self.max_items is None:
            return False
        return self.scroll_offset + self.max_items < len(self.options)
