"""
RemindR Schedule Loader - Plain Text Schedule Parsing

Reads the day's schedule (reminders.txt) once at startup.

Grammar (one entry per line):
- Blank lines and lines starting with '#' are ignored
- DEADLINE <YYYY-MM-DD> <description>   (keyword is case-insensitive)
- <HH:MM>-<HH:MM> <description>

Malformed lines are dropped with a warning. Loading only fails when the
file cannot be read or contains no valid task.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from .schedule_models import Deadline, Schedule, Task

logger = logging.getLogger(__name__)

DEADLINE_KEYWORD = "DEADLINE "
DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M"


class ScheduleError(Exception):
    """Raised when a schedule cannot be used to run the reminder loop"""
    pass


def _parse_deadline(line: str, deadline_id: str) -> Optional[Deadline]:
    # Single-space split: "DEADLINE  2026-01-01 x" yields an empty date part
    parts = line.split(" ", 2)
    if len(parts) < 3:
        return None

    try:
        due = datetime.strptime(parts[1], DATE_FORMAT).date()
    except ValueError:
        return None

    return Deadline(date=due, description=parts[2], id=deadline_id)


def _parse_task(line: str) -> Optional[Task]:
    time_range, sep, description = line.partition(" ")
    if not sep:
        return None

    start_s, dash, end_s = time_range.partition("-")
    if not dash:
        return None

    try:
        start = datetime.strptime(start_s, TIME_FORMAT).time()
        end = datetime.strptime(end_s, TIME_FORMAT).time()
        return Task(start=start, end=end, description=description)
    except ValueError:
        # Bad time or start >= end
        return None


def parse_schedule(text: str) -> Schedule:
    """
    Parse schedule text into tasks and deadlines.

    Args:
        text: Full schedule file content

    Returns:
        Schedule with tasks sorted by start time (stable for equal starts)
        and deadlines in file order
    """
    schedule = Schedule()

    for line_num, raw_line in enumerate(text.splitlines(), 1):
        line = raw_line.strip()

        if not line or line.startswith("#"):
            continue

        if line.upper().startswith(DEADLINE_KEYWORD):
            deadline = _parse_deadline(line, f"deadline-{len(schedule.deadlines) + 1}")
            if deadline is None:
                logger.warning(f"Skipping invalid deadline on line {line_num}: {line!r}")
                continue
            schedule.deadlines.append(deadline)
            continue

        task = _parse_task(line)
        if task is None:
            logger.warning(f"Skipping invalid task on line {line_num}: {line!r}")
            continue
        schedule.tasks.append(task)

    schedule.tasks.sort(key=lambda t: t.start)

    logger.debug(
        f"Parsed {len(schedule.tasks)} tasks and {len(schedule.deadlines)} deadlines"
    )
    return schedule


def load_schedule(path: Union[str, Path]) -> Schedule:
    """
    Read and parse a schedule file.

    Args:
        path: Location of the schedule file

    Returns:
        Parsed Schedule containing at least one task

    Raises:
        ScheduleError: If the file cannot be read or has no valid tasks
    """
    path = Path(path)

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Cannot read schedule {path}: {e}")
        raise ScheduleError(f"Could not read '{path}': {e}") from e

    schedule = parse_schedule(text)

    if not schedule.tasks:
        raise ScheduleError(f"No valid tasks found in {path}")

    logger.info(
        f"Loaded schedule {path}: {len(schedule.tasks)} tasks, "
        f"{len(schedule.deadlines)} deadlines"
    )
    return schedule
