"""Multiselect over options arranged in labelled groups."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Iterable, Mapping

from pi.prompts import colors, symbols
from pi.prompts.options import Option, OptionCursor, normalize_options
from pi.prompts.prompt import Prompt
from pi.prompts.widgets.base import BaseWidget
from pi.prompts.widgets.multiselect import REQUIRED_MESSAGE, Selection, checkbox_line

if TYPE_CHECKING:
    from pi.prompts.settings import Action


@dataclass(frozen=True)
class _GroupKey:
    label: str


@dataclass(frozen=True)
class Group:
    label: str
    options: list[Option]


@dataclass(frozen=True)
class Row:
    """One line of the flattened list: a group header or one of its options."""

    group: Group
    option: Option | None = None
    last_in_group: bool = False

    @property
    def is_header(self) -> bool:
        return self.option is None


def normalize_groups(raw: Mapping[str, Iterable[Any]] | Iterable[Any]) -> list[Group]:
    """Accept ``{"label": [...options]}`` or a list of ``{"label", "options"}`` mappings."""
    if isinstance(raw, Mapping):
        return [Group(str(label), normalize_options(opts)) for label, opts in raw.items()]
    groups: list[Group] = []
    for item in raw:
        if not isinstance(item, Mapping) or "options" not in item:
            raise ValueError(f"Group needs 'label' and 'options': {item!r}")
        label = item.get("label") or item.get("group") or ""
        groups.append(Group(str(label), normalize_options(item["options"])))
    return groups


class GroupMultiselect(BaseWidget):
    def __init__(
        self,
        message: str,
        options: Mapping[str, Iterable[Any]] | Iterable[Any],
        *,
        initial_values: Iterable[Any] = (),
        required: bool = True,
        selectable_groups: bool = False,
        group_spacing: int = 0,
        cursor_at: Any = None,
        help: str | None = None,
    ) -> None:
        super().__init__(message, help=help)
        self.groups = normalize_groups(options)
        self.selectable_groups = selectable_groups
        self.group_spacing = group_spacing
        self.required = required

        self.rows: list[Row] = []
        for group in self.groups:
            self.rows.append(Row(group))
            for i, option in enumerate(group.options):
                self.rows.append(Row(group, option, i == len(group.options) - 1))
        if not any(not r.is_header for r in self.rows):
            raise ValueError("GroupMultiselect needs at least one option")

        all_options = [o for g in self.groups for o in g.options]
        self.selection = Selection(all_options, initial_values)
        # Headers become navigable placeholders, disabled unless groups are selectable
        self.cursor = OptionCursor(
            [self._row_option(row) for row in self.rows], initial_value=cursor_at
        )

    def _row_option(self, row: Row) -> Option:
        if row.option is not None:
            return row.option
        return Option(value=_GroupKey(row.group.label), label=row.group.label,
                      disabled=not self.selectable_groups)

    @property
    def current_row(self) -> Row:
        return self.rows[self.cursor.index]

    def group_values(self, group: Group) -> list[Any]:
        return [o.value for o in group.options if not o.disabled]

    def initial_value(self) -> Any:
        return self.selection.values()

    def handle_input(self, prompt: Prompt, key: str, action: Action | None) -> None:
        if action == "up":
            self.cursor.move(-1)
        elif action == "down":
            self.cursor.move(1)
        elif action == "space":
            self.toggle_current()
            prompt.value = self.selection.values()
        prompt.cursor = self.cursor.index

    def toggle_current(self) -> None:
        row = self.current_row
        if row.is_header:
            if not self.selectable_groups:
                return
            values = self.group_values(row.group)
            if all(v in self.selection for v in values):
                for v in values:
                    self.selection.discard(v)
            else:
                for v in values:
                    self.selection.add(v)
        elif row.option is not None and not row.option.disabled:
            self.selection.toggle(row.option.value)

    def prepare_submit(self, prompt: Prompt) -> bool:
        if self.required and not prompt.value:
            prompt.fail(REQUIRED_MESSAGE)
            return False
        return True

    def body_lines(self, prompt: Prompt) -> list[str]:
        lines: list[str] = []
        for index, row in enumerate(self.rows):
            active = index == self.cursor.index
            if row.option is None:
                if index > 0 and self.group_spacing > 0:
                    lines.extend([""] * self.group_spacing)
                lines.append(self.header_line(row, active))
                continue
            if self.selectable_groups:
                branch = symbols.BAR_END if row.last_in_group else symbols.BAR
                prefix = colors.dim(f"{branch} ")
            else:
                prefix = "  "
            selected = row.option.value in self.selection
            lines.append(self.fit(prompt, prefix + checkbox_line(row.option, active, selected)))
        return lines

    def header_line(self, row: Row, active: bool) -> str:
        if not self.selectable_groups:
            return colors.dim(row.group.label)
        values = self.group_values(row.group)
        all_selected = bool(values) and all(v in self.selection for v in values)
        box = colors.green(symbols.CHECKBOX_SELECTED) if all_selected else colors.dim(symbols.CHECKBOX_INACTIVE)
        label = row.group.label if active else colors.dim(row.group.label)
        return f"{box} {label}"

    def final_display(self, prompt: Prompt) -> str:
        return ", ".join(
            row.option.label
            for row in self.rows
            if row.option is not None and row.option.value in self.selection
        )


def group_multiselect(
    message: str,
    options: Mapping[str, Iterable[Any]] | Iterable[Any],
    *,
    initial_values: Iterable[Any] = (),
    required: bool = True,
    selectable_groups: bool = False,
    group_spacing: int = 0,
    cursor_at: Any = None,
    help: str | None = None,
    **prompt_options: Any,
) -> Any:
    """Return the list of chosen values across all groups, or ``CANCEL``."""
    widget = GroupMultiselect(
        message,
        options,
        initial_values=initial_values,
        required=required,
        selectable_groups=selectable_groups,
        group_spacing=group_spacing,
        cursor_at=cursor_at,
        help=help,
    )
    return Prompt(widget, **prompt_options).run()
