"""Run a list of tasks one after another, each under its own spinner."""

from __future__ import annotations

import inspect
import sys
from dataclasses import dataclass
from typing import IO, Any, Callable, Iterable, Literal, Mapping, Union

from pi.prompts.indicators.spinner import Spinner

TaskStatus = Literal["success", "skipped"]
TaskBody = Union[Callable[[], Any], Callable[[Callable[[str], None]], Any]]


@dataclass(frozen=True)
class Task:
    title: str
    task: TaskBody
    enabled: bool = True


@dataclass(frozen=True)
class TaskResult:
    title: str
    status: TaskStatus
    result: Any = None


def _accepts_message(fn: Callable[..., Any]) -> bool:
    """``True`` if *fn* takes one positional argument (the message updater)."""
    try:
        params = inspect.signature(fn).parameters.values()
    except (TypeError, ValueError):
        return False
    positional = [
        p
        for p in params
        if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD) and p.default is p.empty
    ]
    return len(positional) == 1 or any(p.kind is p.VAR_POSITIONAL for p in params)


def _to_task(raw: Task | Mapping[str, Any]) -> Task:
    if isinstance(raw, Task):
        return raw
    return Task(title=raw["title"], task=raw["task"], enabled=raw.get("enabled", True))


def run_tasks(
    tasks: Iterable[Task | Mapping[str, Any]],
    *,
    output: IO[str] | None = None,
    spinner_factory: Callable[[IO[str]], Spinner] | None = None,
) -> list[TaskResult]:
    """Run *tasks* in order and return one :class:`TaskResult` per task.

    A task whose callable takes one argument receives the spinner's
    ``message`` method to report progress.  Exceptions raised by a task stop
    its spinner with the error frame and then propagate; later tasks do not
    run.
    """
    stream = output if output is not None else sys.stdout
    make_spinner = spinner_factory or (lambda out: Spinner(output=out))
    results: list[TaskResult] = []

    for task in map(_to_task, tasks):
        if not task.enabled:
            results.append(TaskResult(task.title, "skipped"))
            continue

        spin = make_spinner(stream)
        spin.start(task.title)
        try:
            if _accepts_message(task.task):
                value = task.task(spin.message)  # type: ignore[call-arg]
            else:
                value = task.task()  # type: ignore[call-arg]
        except BaseException:
            spin.error(task.title)
            raise
        spin.stop(task.title)
        results.append(TaskResult(task.title, "success", value))

    return results
