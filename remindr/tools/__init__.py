"""
RemindR Tools - System Integration Layer

Capability detection, desktop notifications and the daily report.
"""

from . import environment, notifier, report

__all__ = [
    'environment',
    'notifier',
    'report',
]
