"""
RemindR Daily Report - End-of-Day Summary

Writes daily_report_<YYYY-MM-DD>.txt once at shutdown.
An existing report for the same day is overwritten.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Iterable, List, Optional, Union

from remindr.memory import Task

logger = logging.getLogger(__name__)

RULE = "=" * 70
REPORT_PREFIX = "daily_report_"


class ReportError(Exception):
    """Raised when the daily report cannot be written"""
    pass


class TaskOutcome(Enum):
    """Mutually exclusive end-of-day classification"""
    COMPLETED = "✅ COMPLETED"
    NOT_COMPLETED = "❌ NOT COMPLETED"
    SKIPPED = "⏭️  SKIPPED"


def classify(task: Task) -> TaskOutcome:
    if task.completed:
        return TaskOutcome.COMPLETED
    if task.started:
        return TaskOutcome.NOT_COMPLETED
    return TaskOutcome.SKIPPED


@dataclass
class ReportSummary:
    total: int
    completed: int
    not_completed: int
    skipped: int

    @property
    def completion_rate(self) -> int:
        """Completed share in percent, rounded half-up; 0 for an empty day"""
        if self.total == 0:
            return 0
        return (200 * self.completed + self.total) // (2 * self.total)


def summarize(tasks: Iterable[Task]) -> ReportSummary:
    outcomes = [classify(t) for t in tasks]
    return ReportSummary(
        total=len(outcomes),
        completed=outcomes.count(TaskOutcome.COMPLETED),
        not_completed=outcomes.count(TaskOutcome.NOT_COMPLETED),
        skipped=outcomes.count(TaskOutcome.SKIPPED),
    )


def report_path(directory: Union[str, Path], now: datetime) -> Path:
    return Path(directory) / f"{REPORT_PREFIX}{now:%Y-%m-%d}.txt"


def render_report(tasks: List[Task], now: datetime) -> str:
    """Build the report text"""
    lines = [
        "📌 RemindR Daily Report",
        f"Date: {now:%Y-%m-%d}",
        "",
        "Tasks Summary",
        RULE,
        "",
    ]

    for task in tasks:
        lines.append(classify(task).value)
        lines.append(f"   Time: {task.time_range}")
        lines.append(f"   Task: {task.description}")
        if task.reason is not None:
            lines.append(f"   Reason: {task.reason}")
        lines.append("")

    summary = summarize(tasks)
    lines += [
        RULE,
        "",
        "Summary:",
        f"  Total Tasks: {summary.total}",
        f"  ✅ Completed: {summary.completed}",
        f"  ❌ Not Completed: {summary.not_completed}",
        f"  ⏭️  Skipped: {summary.skipped}",
        f"  Completion Rate: {summary.completion_rate}%",
        "",
        f"Generated: {now:%Y-%m-%d %H:%M:%S}",
        "",
    ]
    return "\n".join(lines)


def write_daily_report(
    tasks: List[Task],
    directory: Union[str, Path] = ".",
    now: Optional[datetime] = None,
) -> Path:
    """
    Write the end-of-day report.

    Args:
        tasks: Final task states from the reminder loop
        directory: Where to write the report (default: working directory)
        now: Report timestamp (default: datetime.now()), injected for testability

    Returns:
        Path of the written report

    Raises:
        ReportError: If the file cannot be written
    """
    if now is None:
        now = datetime.now()

    path = report_path(directory, now)

    try:
        path.write_text(render_report(tasks, now), encoding="utf-8")
    except OSError as e:
        logger.error(f"Failed to write report {path}: {e}", exc_info=True)
        raise ReportError(f"Cannot write report {path}: {e}") from e

    logger.info(f"Daily report saved: {path}")
    return path
