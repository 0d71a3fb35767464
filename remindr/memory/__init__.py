"""
RemindR Memory - Today's Schedule

Loaded once at startup. No persistence across runs.
"""

from .schedule_models import Task, Deadline, Schedule, seconds_since_midnight
from .schedule_loader import parse_schedule, load_schedule, ScheduleError

__all__ = [
    'Task',
    'Deadline',
    'Schedule',
    'seconds_since_midnight',
    'parse_schedule',
    'load_schedule',
    'ScheduleError',
]
