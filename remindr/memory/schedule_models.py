"""
RemindR Schedule Models

Data structures for a single day's schedule.

Philosophy:
- Loaded once at startup, never rescheduled
- Only the reminder loop mutates task state
- No persistence beyond the daily report
"""

from dataclasses import dataclass, field
from datetime import date, time
from typing import List, Optional


def seconds_since_midnight(value: time) -> int:
    """Whole seconds elapsed since 00:00 for a time of day"""
    return value.hour * 3600 + value.minute * 60 + value.second


@dataclass
class Task:
    """
    A time-boxed task for today.

    Lifecycle flags (set by the reminder loop only):
    - started: the clock entered [start, end)
    - completed_asked: the completion prompt was shown (implies started)
    - completed: the user confirmed completion
    - reason: why it was not completed (only after a "no" answer)
    """
    start: time
    end: time
    description: str
    started: bool = False
    completed_asked: bool = False
    completed: bool = False
    reason: Optional[str] = None

    # Pre-calculated for repeated comparison against the clock
    start_seconds: int = field(init=False, repr=False)
    end_seconds: int = field(init=False, repr=False)

    def __post_init__(self):
        """Validate task data"""
        if not isinstance(self.start, time) or not isinstance(self.end, time):
            raise TypeError("start and end must be datetime.time")
        if self.start >= self.end:
            raise ValueError(
                f"Task start {self.start:%H:%M} must be before end {self.end:%H:%M}"
            )

        self.start_seconds = seconds_since_midnight(self.start)
        self.end_seconds = seconds_since_midnight(self.end)

    @property
    def time_range(self) -> str:
        return f"{self.start:%H:%M}-{self.end:%H:%M}"

    def is_active(self, now_seconds: int) -> bool:
        """True while the clock is inside [start, end)"""
        return self.start_seconds <= now_seconds < self.end_seconds

    def has_ended(self, now_seconds: int) -> bool:
        return now_seconds >= self.end_seconds


@dataclass
class Deadline:
    """
    A date-based deadline.

    The id is assigned at load time and keys the loop's alert tracking,
    so two deadlines with the same text are still tracked separately.
    """
    date: date
    description: str
    id: str = ""

    def __post_init__(self):
        if not isinstance(self.date, date):
            raise TypeError("date must be datetime.date")

    def days_left(self, today: date) -> int:
        """
        Days until the deadline.

        Negative means overdue.
        """
        return (self.date - today).days


@dataclass
class Schedule:
    """Everything parsed from the schedule file"""
    tasks: List[Task] = field(default_factory=list)
    deadlines: List[Deadline] = field(default_factory=list)

    @property
    def latest_end(self) -> Optional[time]:
        if not self.tasks:
            return None
        return max(t.end for t in self.tasks)
