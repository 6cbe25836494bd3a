"""Tests for the Prompt state machine: cancel, submit, validation, CI fallback."""

from __future__ import annotations

import pickle
from typing import Any, Callable

import pytest

from pi.prompts import symbols
from pi.prompts import validation as v
from pi.prompts.prompt import CANCEL, Prompt, PromptState, _Cancel, is_cancel
from pi.prompts.registry import PromptRegistry
from pi.prompts.settings import Settings, SettingsConfig
from pi.prompts.testing import KeySequence, simulate, simulate_with_output
from pi.prompts.validation import Warning
from pi.prompts.widgets import (
    autocomplete,
    confirm,
    group_multiselect,
    multiselect,
    password,
    select,
    select_key,
    text,
)
from pi.prompts.widgets.text import Text

from .virtual_terminal import VirtualTerminal

KEY_ENTER = "\r"
KEY_ESCAPE = "\x1b"
KEY_CTRL_C = "\x03"
KEY_BACKSPACE = "\x7f"


def _interactive() -> Settings:
    return Settings(SettingsConfig(ci_mode=False))


def _ci() -> Settings:
    return Settings(SettingsConfig(ci_mode=True))


def _prompt(widget: Any = None, **kwargs: Any) -> tuple[Prompt, VirtualTerminal]:
    term = VirtualTerminal()
    prompt = Prompt(
        widget or Text("Name?"),
        output=term,
        key_reader=KeySequence([]),
        registry=PromptRegistry(),
        settings=_interactive(),
        **kwargs,
    )
    return prompt, term


def _type(prompt: Prompt, chars: str) -> None:
    for char in chars:
        prompt.handle_key(char)


# ---------------------------------------------------------------------------
# Cancel sentinel
# ---------------------------------------------------------------------------


PROMPT_CALLS: dict[str, Callable[[], tuple[Callable[..., Any], tuple[Any, ...], dict[str, Any]]]] = {
    "text": lambda: (text, ("Name?",), {}),
    "password": lambda: (password, ("Secret?",), {}),
    "confirm_false": lambda: (confirm, ("Sure?",), {"initial_value": False}),
    "select_none_value": lambda: (select, ("Pick",), {"options": [{"value": None, "label": "none"}]}),
    "multiselect": lambda: (multiselect, ("Pick",), {"options": ["a", "b"]}),
    "autocomplete": lambda: (autocomplete, ("Pick",), {"options": ["a", "b"]}),
    "group_multiselect": lambda: (group_multiselect, ("Pick",), {"options": {"G": ["a"]}}),
    "select_key": lambda: (select_key, ("Pick",), {"options": [{"value": "", "key": "e"}]}),
}


class TestCancelSentinel:
    @pytest.mark.parametrize("name", sorted(PROMPT_CALLS))
    @pytest.mark.parametrize("key", [KEY_ESCAPE, KEY_CTRL_C])
    def test_every_widget_returns_cancel(self, name: str, key: str) -> None:
        fn, args, kwargs = PROMPT_CALLS[name]()
        result = simulate(fn, *args, keys=[key], **kwargs)
        assert result is CANCEL
        assert is_cancel(result)

    @pytest.mark.parametrize("value", [None, False, "", 0, [], "CANCEL"])
    def test_falsy_values_are_not_cancel(self, value: Any) -> None:
        assert not is_cancel(value)

    def test_singleton(self) -> None:
        assert _Cancel() is CANCEL
        assert repr(CANCEL) == "CANCEL"

    def test_survives_pickle(self) -> None:
        assert pickle.loads(pickle.dumps(CANCEL)) is CANCEL

    def test_cancel_final_frame_and_cursor(self) -> None:
        result, output = simulate_with_output(text, "Name?", keys=["a", KEY_ESCAPE])
        assert result is CANCEL
        assert output.endswith("\x1b[?25h")

    def test_input_loss_cancels(self) -> None:
        term = VirtualTerminal()
        prompt = Prompt(Text("Name?"), input=term, output=term, registry=PromptRegistry(), settings=_interactive())
        # The stream has no descriptor, so the first read synthesizes ctrl+c
        assert prompt.run() is CANCEL


# ---------------------------------------------------------------------------
# State machine
# ---------------------------------------------------------------------------


class TestStateTransitions:
    def test_starts_initial_then_active(self) -> None:
        prompt, _ = _prompt()
        assert prompt.state is PromptState.INITIAL
        prompt.run()
        assert prompt.state is PromptState.SUBMIT

    def test_keys_ignored_once_terminal(self) -> None:
        prompt, _ = _prompt()
        prompt.handle_key(KEY_ESCAPE)
        assert prompt.state is PromptState.CANCEL
        prompt.handle_key("a")
        assert prompt.value == ""

    def test_error_cleared_by_next_key(self) -> None:
        prompt, _ = _prompt(validate=v.required())
        prompt.handle_key(KEY_ENTER)
        assert prompt.state is PromptState.ERROR
        assert prompt.error_message == "This field is required"
        prompt.handle_key("a")
        assert prompt.state is PromptState.ACTIVE
        assert prompt.error_message is None
        prompt.handle_key(KEY_ENTER)
        assert prompt.state is PromptState.SUBMIT
        assert prompt.value == "a"

    def test_error_rendered_in_frame(self) -> None:
        prompt, _ = _prompt(validate=v.required("Needed"))
        prompt.handle_key(KEY_ENTER)
        assert "Needed" in prompt.widget.build_frame(prompt)

    def test_unchanged_state_renders_nothing(self) -> None:
        prompt, term = _prompt()
        prompt.render()
        term.clear_buffer()
        prompt.handle_key("\x1b[A")  # no effect on text entry
        assert prompt.render() is False
        assert term.output == ""


class TestWarningFlow:
    @staticmethod
    def _short_warning(value: str) -> Warning | None:
        return Warning("Looks short") if len(value) < 3 else None

    def test_enter_confirms(self) -> None:
        prompt, _ = _prompt(validate=self._short_warning)
        _type(prompt, "ab")
        prompt.handle_key(KEY_ENTER)
        assert prompt.state is PromptState.WARNING
        assert prompt.warning_message == "Looks short"
        prompt.handle_key(KEY_ENTER)
        assert prompt.state is PromptState.SUBMIT
        assert prompt.value == "ab"

    def test_editing_requires_fresh_validation(self) -> None:
        prompt, _ = _prompt(validate=self._short_warning)
        _type(prompt, "ab")
        prompt.handle_key(KEY_ENTER)
        prompt.handle_key("x")
        assert prompt.state is PromptState.ACTIVE
        prompt.handle_key(KEY_BACKSPACE)
        prompt.handle_key(KEY_ENTER)
        assert prompt.state is PromptState.WARNING

    def test_cancel_from_warning(self) -> None:
        prompt, _ = _prompt(validate=self._short_warning)
        prompt.handle_key(KEY_ENTER)
        prompt.handle_key(KEY_ESCAPE)
        assert prompt.state is PromptState.CANCEL

    def test_warning_frame_mentions_confirmation(self) -> None:
        prompt, _ = _prompt(validate=self._short_warning)
        prompt.handle_key(KEY_ENTER)
        frame = prompt.widget.build_frame(prompt)
        assert "Looks short" in frame
        assert "enter to confirm" in frame

    def test_end_to_end(self) -> None:
        result = simulate(text, "Name?", keys=list("ab") + [KEY_ENTER, KEY_ENTER], validate=self._short_warning)
        assert result == "ab"

    def test_confirmation_does_not_leak_to_next_submit(self) -> None:
        calls: list[str] = []

        def validate(value: str) -> Warning | None:
            calls.append(value)
            return Warning("hm")

        prompt, _ = _prompt(validate=validate)
        prompt.handle_key(KEY_ENTER)
        prompt.handle_key(KEY_ENTER)
        assert prompt.state is PromptState.SUBMIT
        assert prompt._warning_confirmed is False


class TestTransforms:
    def test_applied_after_validation(self) -> None:
        assert simulate(text, "Code?", keys=["x", KEY_ENTER], validate=v.required(), transform="upper") == "X"

    def test_not_applied_when_invalid(self) -> None:
        seen: list[Any] = []

        def record(value: Any) -> Any:
            seen.append(value)
            return value

        prompt, _ = _prompt(validate=v.required(), transform=record)
        prompt.handle_key(KEY_ENTER)
        assert prompt.state is PromptState.ERROR
        assert seen == []

    def test_failure_is_an_error(self) -> None:
        prompt, _ = _prompt(transform="to_integer")
        _type(prompt, "abc")
        prompt.handle_key(KEY_ENTER)
        assert prompt.state is PromptState.ERROR
        assert prompt.error_message is not None
        assert prompt.error_message.startswith("Transform failed:")
        assert prompt.value == "abc"

    def test_unknown_name_rejected_at_construction(self) -> None:
        with pytest.raises(ValueError):
            _prompt(transform="nope")

    def test_chain(self) -> None:
        result = simulate(text, "Name?", keys=list("  Ada  ") + [KEY_ENTER], transform=v.chain("strip", "lower"))
        assert result == "ada"


# ---------------------------------------------------------------------------
# Non-interactive fallback
# ---------------------------------------------------------------------------


class TestNonInteractive:
    def _run(self, widget: Any, **kwargs: Any) -> tuple[Any, VirtualTerminal]:
        term = VirtualTerminal()
        prompt = Prompt(
            widget,
            output=term,
            key_reader=KeySequence([], max_reads=0),
            registry=PromptRegistry(),
            settings=_ci(),
            **kwargs,
        )
        return prompt.run(), term

    def test_submits_default(self) -> None:
        result, term = self._run(Text("Name?", default_value="bob"))
        assert result == "bob"
        assert "bob" in term.plain

    def test_never_reads_keys_or_hides_cursor(self) -> None:
        _, term = self._run(Text("Name?", initial_value="x"))
        assert "\x1b[?25l" not in term.output

    def test_failing_validation_warns_and_returns(self) -> None:
        result, term = self._run(Text("Name?"), validate=v.required("Name is required"))
        assert result == ""
        assert "Name is required (non-interactive mode)" in term.plain

    def test_warning_outcome_also_reported(self) -> None:
        result, term = self._run(Text("Name?", initial_value="x"), validate=lambda _: Warning("odd"))
        assert result == "x"
        assert "odd (non-interactive mode)" in term.plain

    def test_transform_applied(self) -> None:
        result, _ = self._run(Text("Name?", initial_value=" a "), transform="strip")
        assert result == "a"

    def test_auto_with_scripted_keys_is_interactive(self) -> None:
        term = VirtualTerminal()
        prompt = Prompt(
            Text("Name?"),
            output=term,
            key_reader=KeySequence(["a", KEY_ENTER]),
            registry=PromptRegistry(),
            settings=Settings(SettingsConfig(ci_mode="auto")),
        )
        assert prompt.run() == "a"

    def test_auto_without_tty_is_non_interactive(self) -> None:
        term = VirtualTerminal()
        prompt = Prompt(
            Text("Name?", default_value="d"),
            input=VirtualTerminal(),
            output=term,
            registry=PromptRegistry(),
            settings=Settings(SettingsConfig(ci_mode="auto")),
        )
        assert prompt.non_interactive()
        assert prompt.run() == "d"

    def test_ci_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CI", "true")
        prompt, _ = _prompt()
        prompt.settings = Settings(SettingsConfig(ci_mode="auto"))
        prompt._key_reader = None
        assert prompt.non_interactive()


# ---------------------------------------------------------------------------
# Guide bars
# ---------------------------------------------------------------------------


class TestGuide:
    def test_with_guide_off_drops_bars(self) -> None:
        prompt, _ = _prompt()
        prompt.settings = Settings(SettingsConfig(ci_mode=False, with_guide=False))
        frame = prompt.widget.build_frame(prompt)
        assert symbols.BAR not in frame
