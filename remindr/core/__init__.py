"""
RemindR Core - The reminder loop
"""

from .reminder_loop import (
    ReminderLoop,
    CHECK_INTERVAL_SECS,
    DEADLINE_COOLDOWN_SECS,
    POPUP_DISPLAY_SECS,
    deadline_message,
)

__all__ = [
    'ReminderLoop',
    'CHECK_INTERVAL_SECS',
    'DEADLINE_COOLDOWN_SECS',
    'POPUP_DISPLAY_SECS',
    'deadline_message',
]
