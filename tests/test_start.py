"""
Tests for the RemindR entry point

Covers exit codes, the startup listing, interruption wiring and the
shutdown path (report always written, failures do not change the exit code).
"""

import sys
import signal
import logging
import tempfile
from datetime import datetime
from pathlib import Path
from unittest.mock import Mock, patch

print("=" * 70)
print("Starting RemindR Entry Point Tests...")
print("=" * 70)

sys.path.insert(0, str(Path(__file__).parent.parent))

import start
from remindr.core import ReminderLoop
from remindr.memory import parse_schedule
from remindr.tools.environment import Environment
from remindr.tools.report import ReportError

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

HEADLESS = Environment(has_dialog=False, has_audio=False, headless=True)


def run_main(schedule_text, tmpdir, extra_args=()):
    schedule_path = Path(tmpdir) / "reminders.txt"
    if schedule_text is not None:
        schedule_path.write_text(schedule_text, encoding="utf-8")
    report_dir = Path(tmpdir) / "reports"
    report_dir.mkdir()
    argv = ["--schedule", str(schedule_path), "--report-dir", str(report_dir), "--no-clear", *extra_args]
    return start.main(argv), report_dir


def test_exit_code_when_schedule_missing():
    with tempfile.TemporaryDirectory() as tmpdir:
        code, report_dir = run_main(None, tmpdir)
        assert code == 1
        assert list(report_dir.iterdir()) == []
    print("✓ Missing schedule exits 1")


def test_exit_code_when_only_deadlines():
    with tempfile.TemporaryDirectory() as tmpdir:
        with patch('start.ReminderLoop') as mock_loop:
            code, report_dir = run_main("DEADLINE 2026-01-01 Pay rent\n", tmpdir)
        assert code == 1
        assert not mock_loop.called
        assert list(report_dir.iterdir()) == []
    print("✓ Deadline-only schedule exits 1 without a report")


def test_normal_run_writes_report():
    with tempfile.TemporaryDirectory() as tmpdir:
        with patch('start.Environment.detect', return_value=HEADLESS), \
                patch('start.install_interrupt_handlers') as mock_handlers, \
                patch.object(ReminderLoop, 'run', return_value=True) as mock_run:
            code, report_dir = run_main("09:00-09:05 Drink water\nDEADLINE 2099-01-01 Far away\n", tmpdir)

        assert code == 0
        assert mock_run.called
        assert mock_handlers.called
        reports = list(report_dir.glob("daily_report_*.txt"))
        assert len(reports) == 1
        content = reports[0].read_text(encoding="utf-8")
        assert "⏭️  SKIPPED" in content
        assert "   Task: Drink water" in content
    print("✓ Report written on normal exit")


def test_deadlines_seeded_before_loop():
    captured = {}

    def fake_run(self):
        captured.update(self.last_deadline_shown)
        return True

    with tempfile.TemporaryDirectory() as tmpdir:
        with patch('start.Environment.detect', return_value=HEADLESS), \
                patch('start.install_interrupt_handlers'), \
                patch.object(ReminderLoop, 'run', fake_run):
            code, _ = run_main("09:00-09:05 A\nDEADLINE 2099-01-01 Far away\n", tmpdir)
    assert code == 0
    assert set(captured) == {"deadline-1"}


def test_report_failure_keeps_exit_code():
    with tempfile.TemporaryDirectory() as tmpdir:
        with patch('start.Environment.detect', return_value=HEADLESS), \
                patch('start.install_interrupt_handlers'), \
                patch.object(ReminderLoop, 'run', return_value=False), \
                patch('start.write_daily_report', side_effect=ReportError("disk full")):
            code, _ = run_main("09:00-09:05 Drink water\n", tmpdir)
    assert code == 0
    print("✓ Report failure is only a diagnostic")


def test_speak_flag_starts_and_stops_voice():
    voice = Mock()
    with tempfile.TemporaryDirectory() as tmpdir:
        with patch('start.Environment.detect', return_value=HEADLESS), \
                patch('start.install_interrupt_handlers'), \
                patch('start.VoiceOutputManager', return_value=voice) as mock_voice, \
                patch.object(ReminderLoop, 'run', return_value=True):
            code, _ = run_main("09:00-09:05 A\n", tmpdir, extra_args=["--speak"])
    assert code == 0
    assert mock_voice.called
    voice.shutdown.assert_called_once()


def test_interrupt_handler_requests_stop():
    loop = ReminderLoop(parse_schedule("09:00-10:00 A"), Mock())
    with patch('signal.signal') as mock_signal:
        start.install_interrupt_handlers(loop)

    registered = {c[0][0]: c[0][1] for c in mock_signal.call_args_list}
    assert set(registered) == {signal.SIGINT, signal.SIGTERM}

    with patch('builtins.print'):
        registered[signal.SIGINT](signal.SIGINT, None)
    assert loop.stop_requested
    print("✓ SIGINT stops the loop instead of killing the process")


def test_display_schedule():
    schedule = parse_schedule(
        "09:00-09:05 Drink water\nDEADLINE 2026-03-05 Pay rent\nDEADLINE 2026-02-28 Taxes"
    )
    with patch('builtins.print') as mock_print:
        start.display_schedule(schedule, datetime(2026, 3, 2, 8, 0))
    printed = [c[0][0] for c in mock_print.call_args_list if c[0]]
    assert "  09:00-09:05 Drink water" in printed
    assert "  ⏳ Pay rent (in 3 days)" in printed
    assert "  ⏳ Taxes (2 days ago!)" in printed

    with patch('builtins.print') as mock_print:
        start.display_schedule(parse_schedule("09:00-09:05 A"), datetime(2026, 3, 2))
    printed = [c[0][0] for c in mock_print.call_args_list if c[0]]
    assert "  (No deadlines)" in printed


def run_all_tests():
    """Run all entry point tests"""
    test_passed = False
    try:
        test_exit_code_when_schedule_missing()
        test_exit_code_when_only_deadlines()
        test_normal_run_writes_report()
        test_deadlines_seeded_before_loop()
        test_report_failure_keeps_exit_code()
        test_speak_flag_starts_and_stops_voice()
        test_interrupt_handler_requests_stop()
        test_display_schedule()
        print("\n✅ ALL ENTRY POINT TESTS PASSED")
        test_passed = True
    except AssertionError as e:
        logger.error(f"Assertion failed: {e}", exc_info=True)
    return test_passed


if __name__ == "__main__":
    sys.exit(0 if run_all_tests() else 1)
