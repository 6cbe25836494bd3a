"""Animated indicators: spinner, progress bar, sequential task runner."""

from pi.prompts.indicators.base import AnimatedIndicator
from pi.prompts.indicators.progress import Progress, progress
from pi.prompts.indicators.spinner import Spinner, spinner
from pi.prompts.indicators.tasks import Task, TaskResult, run_tasks

__all__ = [
    "AnimatedIndicator",
    "Progress",
    "Spinner",
    "Task",
    "TaskResult",
    "progress",
    "run_tasks",
    "spinner",
]
