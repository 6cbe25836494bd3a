"""Prompt widgets."""

from pi.prompts.widgets.autocomplete import Autocomplete, autocomplete
from pi.prompts.widgets.base import BaseWidget
from pi.prompts.widgets.confirm import Confirm, confirm
from pi.prompts.widgets.group_multiselect import GroupMultiselect, group_multiselect
from pi.prompts.widgets.multiselect import Multiselect, multiselect
from pi.prompts.widgets.password import Password, password
from pi.prompts.widgets.select import Select, select
from pi.prompts.widgets.select_key import SelectKey, select_key
from pi.prompts.widgets.text import Text, TextBuffer, text

__all__ = [
    "Autocomplete",
    "BaseWidget",
    "Confirm",
    "GroupMultiselect",
    "Multiselect",
    "Password",
    "Select",
    "SelectKey",
    "Text",
    "TextBuffer",
    "autocomplete",
    "confirm",
    "group_multiselect",
    "multiselect",
    "password",
    "select",
    "select_key",
    "text",
]
