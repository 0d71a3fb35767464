"""
RemindR - Daily Task Reminder

Reads today's schedule, pops up reminders as tasks start, checks in when
they end, nags about deadlines, and writes an end-of-day report.
"""

__version__ = "1.0.0"
