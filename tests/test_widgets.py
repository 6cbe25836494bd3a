"""Tests for the individual prompt widgets driven by scripted keys."""

from __future__ import annotations

from typing import Any

import pytest

from pi.prompts import symbols
from pi.prompts.prompt import Prompt, PromptState
from pi.prompts.registry import PromptRegistry
from pi.prompts.settings import Settings, SettingsConfig
from pi.prompts.testing import KeySequence, simulate, simulate_with_output
from pi.prompts.utils import strip_ansi
from pi.prompts.widgets import (
    Autocomplete,
    GroupMultiselect,
    Multiselect,
    Select,
    SelectKey,
    autocomplete,
    confirm,
    group_multiselect,
    multiselect,
    password,
    select,
    select_key,
    text,
)
from pi.prompts.widgets.group_multiselect import normalize_groups

from .virtual_terminal import VirtualTerminal

ENTER = "\r"
SPACE = " "
UP = "\x1b[A"
DOWN = "\x1b[B"
RIGHT = "\x1b[C"
LEFT = "\x1b[D"
BACKSPACE = "\x7f"


def _prompt(widget: Any) -> Prompt:
    return Prompt(
        widget,
        output=VirtualTerminal(),
        key_reader=KeySequence([]),
        registry=PromptRegistry(),
        settings=Settings(SettingsConfig(ci_mode=False)),
    )


def _frame(prompt: Prompt) -> str:
    return strip_ansi(prompt.widget.build_frame(prompt))


# ---------------------------------------------------------------------------
# Select
# ---------------------------------------------------------------------------


class TestSelect:
    def test_down_down_enter(self) -> None:
        assert simulate(select, "Pick", ["a", "b", "c"], keys=[DOWN, DOWN, ENTER]) == "c"

    def test_first_by_default(self) -> None:
        assert simulate(select, "Pick", ["a", "b", "c"], keys=[ENTER]) == "a"

    def test_wraps(self) -> None:
        assert simulate(select, "Pick", ["a", "b", "c"], keys=[UP, ENTER]) == "c"
        assert simulate(select, "Pick", ["a", "b", "c"], keys=[DOWN, DOWN, DOWN, ENTER]) == "a"

    def test_vim_keys(self) -> None:
        assert simulate(select, "Pick", ["a", "b", "c"], keys=["j", "j", "k", ENTER]) == "b"

    def test_skips_disabled(self) -> None:
        options = ["a", {"value": "b", "disabled": True}, "c"]
        assert simulate(select, "Pick", options, keys=[DOWN, ENTER]) == "c"

    def test_initial_value(self) -> None:
        assert simulate(select, "Pick", ["a", "b", "c"], keys=[ENTER], initial_value="b") == "b"

    def test_labels_and_values(self) -> None:
        options = [{"value": 1, "label": "One"}, {"value": 2, "label": "Two"}]
        result, output = simulate_with_output(select, "Pick", options, keys=[DOWN, ENTER])
        assert result == 2
        assert "Two" in strip_ansi(output)

    def test_empty_options(self) -> None:
        with pytest.raises(ValueError):
            Select("Pick", [])

    def test_scroll_markers(self) -> None:
        names = ["alpha", "bravo", "charlie", "delta", "echo", "foxtrot"]
        prompt = _prompt(Select("Pick", names, max_items=2))
        frame = _frame(prompt)
        assert "bravo" in frame and "charlie" not in frame
        assert "..." in frame
        for _ in range(3):
            prompt.handle_key(DOWN)
        frame = _frame(prompt)
        assert "delta" in frame and "alpha" not in frame

    def test_hint_only_on_active(self) -> None:
        prompt = _prompt(Select("Pick", [{"value": "a", "hint": "first"}, "b"]))
        assert "(first)" in _frame(prompt)
        prompt.handle_key(DOWN)
        assert "(first)" not in _frame(prompt)


# ---------------------------------------------------------------------------
# Multiselect
# ---------------------------------------------------------------------------


class TestMultiselect:
    def test_space_down_space_enter(self) -> None:
        result = simulate(multiselect, "Pick", ["a", "b", "c"], keys=[SPACE, DOWN, SPACE, ENTER])
        assert result == ["a", "b"]

    def test_result_in_option_order(self) -> None:
        result = simulate(multiselect, "Pick", ["a", "b", "c"], keys=[DOWN, DOWN, SPACE, UP, UP, SPACE, ENTER])
        assert result == ["a", "c"]

    def test_toggle_twice_deselects(self) -> None:
        result = simulate(multiselect, "Pick", ["a", "b"], keys=[SPACE, SPACE, DOWN, SPACE, ENTER])
        assert result == ["b"]

    def test_required(self) -> None:
        prompt = _prompt(Multiselect("Pick", ["a", "b"]))
        prompt.handle_key(ENTER)
        assert prompt.state is PromptState.ERROR
        assert "Please select at least one option." in _frame(prompt)
        prompt.handle_key(SPACE)
        prompt.handle_key(ENTER)
        assert prompt.state is PromptState.SUBMIT
        assert prompt.value == ["a"]

    def test_not_required(self) -> None:
        assert simulate(multiselect, "Pick", ["a", "b"], keys=[ENTER], required=False) == []

    def test_toggle_all(self) -> None:
        options = ["a", {"value": "b", "disabled": True}, "c"]
        assert simulate(multiselect, "Pick", options, keys=["a", ENTER]) == ["a", "c"]
        assert simulate(multiselect, "Pick", options, keys=["a", "a", ENTER], required=False) == []

    def test_invert(self) -> None:
        result = simulate(multiselect, "Pick", ["a", "b", "c"], keys=["i", ENTER], initial_values=["a"])
        assert result == ["b", "c"]

    def test_initial_values(self) -> None:
        assert simulate(multiselect, "Pick", ["a", "b", "c"], keys=[ENTER], initial_values=["c", "a"]) == ["a", "c"]

    def test_unhashable_values(self) -> None:
        options = [{"value": {"id": 1}, "label": "one"}, {"value": {"id": 2}, "label": "two"}]
        result = simulate(multiselect, "Pick", options, keys=[DOWN, SPACE, ENTER])
        assert result == [{"id": 2}]

    def test_final_frame_lists_labels(self) -> None:
        _, output = simulate_with_output(multiselect, "Pick", ["a", "b"], keys=[SPACE, DOWN, SPACE, ENTER])
        assert "a, b" in strip_ansi(output)


# ---------------------------------------------------------------------------
# Confirm
# ---------------------------------------------------------------------------


class TestConfirm:
    def test_default_true(self) -> None:
        assert simulate(confirm, "Sure?", keys=[ENTER]) is True

    def test_initial_false(self) -> None:
        assert simulate(confirm, "Sure?", keys=[ENTER], initial_value=False) is False

    @pytest.mark.parametrize(
        ("key", "expected"),
        [("n", False), ("N", False), ("y", True), (RIGHT, False), (DOWN, False), (LEFT, True), (UP, True)],
    )
    def test_keys(self, key: str, expected: bool) -> None:
        initial = not expected
        assert simulate(confirm, "Sure?", keys=[key, ENTER], initial_value=initial) is expected

    def test_custom_labels_in_final_frame(self) -> None:
        _, output = simulate_with_output(confirm, "Sure?", keys=["n", ENTER], active="Yep", inactive="Nope")
        assert strip_ansi(output).rstrip().endswith("Nope")


# ---------------------------------------------------------------------------
# Text and Password
# ---------------------------------------------------------------------------


class TestText:
    def test_typing(self) -> None:
        assert simulate(text, "Name?", keys=list("Ada") + [ENTER]) == "Ada"

    def test_navigation_letters_are_text(self) -> None:
        assert simulate(text, "Name?", keys=list("jkhl") + [ENTER]) == "jkhl"

    def test_space_is_text(self) -> None:
        assert simulate(text, "Name?", keys=["a", SPACE, "b", ENTER]) == "a b"

    def test_backspace(self) -> None:
        assert simulate(text, "Name?", keys=list("abc") + [BACKSPACE, ENTER]) == "ab"
        assert simulate(text, "Name?", keys=["\b", "x", ENTER]) == "x"

    def test_insert_at_cursor(self) -> None:
        assert simulate(text, "Name?", keys=["a", "c", LEFT, "b", ENTER]) == "abc"
        assert simulate(text, "Name?", keys=["a", LEFT, LEFT, RIGHT, "b", ENTER]) == "ab"

    def test_default_value(self) -> None:
        assert simulate(text, "Name?", keys=[ENTER], default_value="anon") == "anon"
        assert simulate(text, "Name?", keys=["x", ENTER], default_value="anon") == "x"

    def test_initial_value(self) -> None:
        assert simulate(text, "Name?", keys=["!", ENTER], initial_value="hi") == "hi!"

    def test_placeholder_rendered(self) -> None:
        _, output = simulate_with_output(text, "Name?", keys=[ENTER], placeholder="your name")
        assert "your name" in strip_ansi(output)

    def test_unicode_grapheme_editing(self) -> None:
        assert simulate(text, "Name?", keys=["é", "👍", BACKSPACE, ENTER]) == "é"

    def test_help_line(self) -> None:
        _, output = simulate_with_output(text, "Name?", keys=[ENTER], help="Letters only")
        assert "Letters only" in strip_ansi(output)


class TestPassword:
    def test_value_returned_but_never_echoed(self) -> None:
        result, output = simulate_with_output(password, "Secret?", keys=list("s3cret") + [ENTER])
        assert result == "s3cret"
        plain = strip_ansi(output)
        assert "s3cret" not in plain
        assert symbols.PASSWORD_MASK * 6 in plain

    def test_custom_mask(self) -> None:
        _, output = simulate_with_output(password, "Secret?", keys=list("ab") + [ENTER], mask="*")
        assert "**" in strip_ansi(output)

    def test_backspace(self) -> None:
        assert simulate(password, "Secret?", keys=list("abc") + [BACKSPACE, ENTER]) == "ab"


# ---------------------------------------------------------------------------
# Autocomplete
# ---------------------------------------------------------------------------


FRUIT = ["apple", "banana", "cherry"]


class TestAutocomplete:
    def test_filter_then_submit(self) -> None:
        assert simulate(autocomplete, "Fruit", FRUIT, keys=list("ban") + [ENTER]) == "banana"

    def test_arrows_move_highlight(self) -> None:
        assert simulate(autocomplete, "Fruit", FRUIT, keys=[DOWN, ENTER]) == "banana"
        assert simulate(autocomplete, "Fruit", FRUIT, keys=[UP, ENTER]) == "cherry"

    def test_letters_are_query_not_navigation(self) -> None:
        assert simulate(autocomplete, "Fruit", ["jam", "kiwi"], keys=["k", ENTER]) == "kiwi"

    def test_editing_resets_highlight(self) -> None:
        widget = Autocomplete("Fruit", FRUIT)
        prompt = _prompt(widget)
        prompt.handle_key(DOWN)
        assert widget.selected == 1
        prompt.handle_key("a")
        assert widget.selected == 0

    def test_no_match(self) -> None:
        prompt = _prompt(Autocomplete("Fruit", FRUIT))
        for key in "zzz":
            prompt.handle_key(key)
        assert "No matching option" in _frame(prompt)
        prompt.handle_key(ENTER)
        assert prompt.state is PromptState.ERROR
        prompt.handle_key(BACKSPACE)
        prompt.handle_key(BACKSPACE)
        prompt.handle_key(BACKSPACE)
        prompt.handle_key(ENTER)
        assert prompt.state is PromptState.SUBMIT
        assert prompt.value == "apple"

    def test_custom_filter_keeps_order(self) -> None:
        def starts_with(option: Any, query: str) -> bool:
            return option.label.startswith(query)

        assert simulate(autocomplete, "Fruit", FRUIT, keys=["c", ENTER], filter=starts_with) == "cherry"

    def test_disabled_highlight_not_submitted(self) -> None:
        prompt = _prompt(Autocomplete("Fruit", [{"value": "apple", "disabled": True}, "banana"]))
        prompt.handle_key(ENTER)
        assert prompt.state is not PromptState.SUBMIT
        prompt.handle_key(DOWN)
        prompt.handle_key(ENTER)
        assert prompt.value == "banana"

    def test_max_items_limits_rows(self) -> None:
        prompt = _prompt(Autocomplete("Pick", [f"item{i}" for i in range(10)], max_items=3))
        frame = _frame(prompt)
        assert "item2" in frame and "item3" not in frame


# ---------------------------------------------------------------------------
# Group multiselect
# ---------------------------------------------------------------------------


GROUPS = {"Fruit": ["apple", "pear"], "Veg": ["kale"]}


class TestGroupMultiselect:
    def test_headers_skipped_by_default(self) -> None:
        result = simulate(group_multiselect, "Pick", GROUPS, keys=[SPACE, DOWN, DOWN, SPACE, ENTER])
        assert result == ["apple", "kale"]

    def test_selectable_group_toggles_members(self) -> None:
        result = simulate(group_multiselect, "Pick", GROUPS, keys=[SPACE, ENTER], selectable_groups=True)
        assert result == ["apple", "pear"]

    def test_group_toggle_clears_when_full(self) -> None:
        result = simulate(
            group_multiselect,
            "Pick",
            GROUPS,
            keys=[SPACE, SPACE, ENTER],
            selectable_groups=True,
            required=False,
        )
        assert result == []

    def test_required(self) -> None:
        prompt = _prompt(GroupMultiselect("Pick", GROUPS))
        prompt.handle_key(ENTER)
        assert prompt.state is PromptState.ERROR

    def test_list_form(self) -> None:
        groups = [{"label": "A", "options": ["x", "y"]}, {"group": "B", "options": ["z"]}]
        assert [g.label for g in normalize_groups(groups)] == ["A", "B"]
        assert simulate(group_multiselect, "Pick", groups, keys=[DOWN, SPACE, ENTER]) == ["y"]

    def test_bad_group(self) -> None:
        with pytest.raises(ValueError):
            normalize_groups([{"label": "A"}])

    def test_no_options(self) -> None:
        with pytest.raises(ValueError):
            GroupMultiselect("Pick", {"Empty": []})

    def test_group_spacing(self) -> None:
        prompt = _prompt(GroupMultiselect("Pick", GROUPS, group_spacing=1))
        lines = _frame(prompt).split("\n")
        veg = next(i for i, line in enumerate(lines) if "Veg" in line)
        assert lines[veg - 1].strip() == symbols.BAR


# ---------------------------------------------------------------------------
# Select by key
# ---------------------------------------------------------------------------


class TestSelectKey:
    def test_explicit_keys(self) -> None:
        options = [{"value": "yes", "key": "y"}, {"value": "no", "key": "n"}]
        assert simulate(select_key, "Continue?", options, keys=["n"]) == "no"

    def test_derived_keys_case_insensitive(self) -> None:
        assert simulate(select_key, "Fruit", ["apple", "banana"], keys=["B"]) == "banana"

    def test_navigation_letters_are_shortcuts(self) -> None:
        assert simulate(select_key, "Move", ["jump", "kick"], keys=["j"]) == "jump"

    def test_unknown_key_ignored(self) -> None:
        assert simulate(select_key, "Fruit", ["apple", "banana"], keys=["x", "a"]) == "apple"

    def test_enter_alone_does_nothing(self) -> None:
        prompt = _prompt(SelectKey("Fruit", ["apple"]))
        prompt.handle_key(ENTER)
        assert not prompt.is_terminal
        prompt.handle_key("a")
        assert prompt.state is PromptState.SUBMIT

    def test_disabled_ignored(self) -> None:
        prompt = _prompt(SelectKey("Fruit", [{"value": "apple", "disabled": True}, "banana"]))
        prompt.handle_key("a")
        assert not prompt.is_terminal

    def test_empty(self) -> None:
        with pytest.raises(ValueError):
            SelectKey("Fruit", [])


# ---------------------------------------------------------------------------
# Guide bars
# ---------------------------------------------------------------------------


class TestWithoutGuide:
    @pytest.mark.parametrize(
        ("fn", "args"),
        [(text, ()), (select, (["a", "b"],)), (confirm, ())],
    )
    def test_no_bars(self, fn: Any, args: tuple[Any, ...]) -> None:
        settings = Settings(SettingsConfig(ci_mode=False, with_guide=False))
        _, output = simulate_with_output(fn, "Q", *args, keys=[ENTER], settings=settings)
        plain = strip_ansi(output)
        assert symbols.BAR not in plain
        assert symbols.BAR_END not in plain
