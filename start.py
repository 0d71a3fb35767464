"""
RemindR Start - Main Entry Point

Startup:
- Parse CLI flags, configure logging
- Load reminders.txt (exit 1 if unreadable or no valid tasks)
- Detect popup/audio capabilities once
- Print today's schedule and deadlines

Run:
- Reminder loop until every task window has passed
- Ctrl+C / SIGTERM stop the loop at the next tick

Shutdown (same path for both):
- Write daily_report_<date>.txt
"""

import argparse
import logging
import signal
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from remindr.core import ReminderLoop
from remindr.memory import Schedule, ScheduleError, load_schedule
from remindr.tools.environment import Environment
from remindr.tools.notifier import DesktopNotifier
from remindr.tools.report import ReportError, write_daily_report
from remindr.voice import VoiceOutputManager

logger = logging.getLogger(__name__)

DEFAULT_SCHEDULE_FILE = "reminders.txt"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

SAMPLE_SCHEDULE = (
    "06:00-07:00 Study physics",
    "07:30-08:00 Workout",
    "DEADLINE 2026-02-28 Midterm Exam",
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="remindr",
        description="Daily task reminder: popups when tasks start, completion check-ins, end-of-day report",
    )
    parser.add_argument("--schedule", default=DEFAULT_SCHEDULE_FILE, help="Schedule file (default: reminders.txt)")
    parser.add_argument("--report-dir", default=".", help="Where to write the daily report")
    parser.add_argument("--speak", action="store_true", help="Also speak notifications aloud")
    parser.add_argument("--no-clear", action="store_true", help="Do not clear the terminal at startup")
    parser.add_argument("--log-level", default="WARNING", help="DEBUG | INFO | WARNING | ERROR")
    parser.add_argument("--verbose", "-v", action="store_true", help="Shorthand for --log-level DEBUG")
    return parser


def setup_logging(level: str):
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format=LOG_FORMAT
    )


def clear_terminal():
    print("\033[2J\033[1;1H", end="", flush=True)


def display_schedule(schedule: Schedule, today: datetime):
    """Print today's tasks and every deadline with its day count"""
    print("📅 Today's Schedule:")
    print("─" * 37)
    for task in schedule.tasks:
        print(f"  {task.time_range} {task.description}")
    print()

    print("📆 Upcoming Deadlines:")
    print("─" * 37)
    if schedule.deadlines:
        for deadline in schedule.deadlines:
            days_left = deadline.days_left(today.date())
            if days_left >= 0:
                print(f"  ⏳ {deadline.description} (in {days_left} days)")
            else:
                print(f"  ⏳ {deadline.description} ({abs(days_left)} days ago!)")
    else:
        print("  (No deadlines)")
    print()


def install_interrupt_handlers(loop: ReminderLoop):
    """Ctrl+C and SIGTERM stop the loop; the report is still written"""

    def _on_signal(signum, frame):
        logger.info(f"Received signal {signum}, stopping after this tick")
        print("\n\n⚠️  RemindR interrupted by user")
        print("📝 Daily report will still be saved.\n")
        loop.request_stop()

    signal.signal(signal.SIGINT, _on_signal)
    signal.signal(signal.SIGTERM, _on_signal)


def main(argv: Optional[List[str]] = None) -> int:
    """
    RemindR entry point.

    Returns:
        Process exit code (1 on schedule errors, 0 otherwise)
    """
    args = build_parser().parse_args(argv)
    setup_logging("DEBUG" if args.verbose else args.log_level)

    if not args.no_clear:
        clear_terminal()
    print("📌 RemindR - Daily Task Reminder")
    print("=" * 34)
    print()

    try:
        schedule = load_schedule(args.schedule)
    except ScheduleError as e:
        print(f"❌ Error: {e}", file=sys.stderr)
        if Path(args.schedule).is_file():
            print("   Make sure tasks are in format: HH:MM-HH:MM Description", file=sys.stderr)
        else:
            print(f"\nCreate '{args.schedule}' with lines like:", file=sys.stderr)
            for line in SAMPLE_SCHEDULE:
                print(line, file=sys.stderr)
            print(file=sys.stderr)
        return 1

    env = Environment.detect()

    voice_output: Optional[VoiceOutputManager] = None
    if args.speak:
        voice_output = VoiceOutputManager()

    notifier = DesktopNotifier(env, voice=voice_output)
    loop = ReminderLoop(schedule, notifier)

    started_at = datetime.now()
    display_schedule(schedule, started_at)
    # Deadlines were just listed above
    loop.mark_deadlines_shown(started_at)

    install_interrupt_handlers(loop)

    print("⏰ Monitoring started. Running in background...")
    print("Press Ctrl+C to stop RemindR\n")

    try:
        loop.run()
    finally:
        # End of day (or interrupted): save report
        try:
            path = write_daily_report(loop.tasks, directory=args.report_dir)
            print(f"📊 Daily report saved to: {path}")
        except ReportError as e:
            print(f"❌ Failed to write report: {e}", file=sys.stderr)

        if voice_output is not None:
            voice_output.shutdown()

    print("\n✅ RemindR ended. Have a great day!\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
