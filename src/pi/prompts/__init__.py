"""pi-prompts: interactive terminal prompts with differential rendering."""

# Validation and transforms
from pi.prompts import validation

# Indicators
from pi.prompts.indicators import (
    Progress,
    Spinner,
    Task,
    TaskResult,
    progress,
    run_tasks,
    spinner,
)

# Key decoding
from pi.prompts.keys import KeyReader, parse_key, raw_mode

# Navigation and filtering
from pi.prompts.fuzzy import fuzzy_filter, fuzzy_match, score
from pi.prompts.options import Option, OptionCursor, normalize_options

# Core prompt machinery
from pi.prompts.prompt import CANCEL, Prompt, PromptState, Widget, is_cancel
from pi.prompts.registry import PromptRegistry, default_registry
from pi.prompts.render import FrameRenderer

# Settings
from pi.prompts.settings import (
    Settings,
    SettingsConfig,
    get_settings,
    reset_settings,
    update_settings,
)
from pi.prompts.validation import Invalid, Passed, Warning

# Widgets
from pi.prompts.widgets import (
    Autocomplete,
    Confirm,
    GroupMultiselect,
    Multiselect,
    Password,
    Select,
    SelectKey,
    Text,
    autocomplete,
    confirm,
    group_multiselect,
    multiselect,
    password,
    select,
    select_key,
    text,
)

__all__ = [
    # Core
    "CANCEL",
    "FrameRenderer",
    "Prompt",
    "PromptRegistry",
    "PromptState",
    "Widget",
    "default_registry",
    "is_cancel",
    # Keys
    "KeyReader",
    "parse_key",
    "raw_mode",
    # Navigation
    "Option",
    "OptionCursor",
    "fuzzy_filter",
    "fuzzy_match",
    "normalize_options",
    "score",
    # Settings
    "Settings",
    "SettingsConfig",
    "get_settings",
    "reset_settings",
    "update_settings",
    # Validation
    "Invalid",
    "Passed",
    "Warning",
    "validation",
    # Widgets
    "Autocomplete",
    "Confirm",
    "GroupMultiselect",
    "Multiselect",
    "Password",
    "Select",
    "SelectKey",
    "Text",
    "autocomplete",
    "confirm",
    "group_multiselect",
    "multiselect",
    "password",
    "select",
    "select_key",
    "text",
    # Indicators
    "Progress",
    "Spinner",
    "Task",
    "TaskResult",
    "progress",
    "run_tasks",
    "spinner",
]
