"""
RemindR Reminder Loop - Polling State Machine

Responsibilities:
- Sample the clock once per tick
- Alert upcoming/overdue deadlines, gated by a cooldown
- Move each task through pending -> started -> completion-asked
- Stop once every task window has passed, or when interrupted

Design:
- Single thread, synchronous polling
- Sole owner of all task and deadline-tracking state
- Completion prompts block the loop until answered (no timeout)
- Notifier failures never reach the loop
"""

import logging
import threading
from datetime import date, datetime
from typing import Callable, Dict, List, Optional

from remindr.memory import Deadline, Schedule, Task, seconds_since_midnight
from remindr.tools.notifier import Notifier

logger = logging.getLogger(__name__)

CHECK_INTERVAL_SECS = 5
DEADLINE_COOLDOWN_SECS = 3600
POPUP_DISPLAY_SECS = 10

COMPLETION_CHEER = "Great! One step closer to your goal 🎉"


def task_start_message(task: Task) -> str:
    return f"⏰ Task Starting:\n{task.description}"


def completion_question(task: Task) -> str:
    return f"Did you complete: {task.description}"


def reason_question(task: Task) -> str:
    return f"Why was '{task.description}' not completed?"


def deadline_message(deadline: Deadline, today: date) -> str:
    days_left = deadline.days_left(today)
    if days_left >= 0:
        return f"⏳ Deadline: {deadline.description}\n({days_left} days left)"
    return f"⏳ Deadline: {deadline.description}\n({abs(days_left)} days overdue!)"


class ReminderLoop:
    """
    Drives the day's schedule against the wall clock.

    Tracking state:
        last_deadline_shown: deadline id -> timestamp of the last alert
        pending_deadline_popups: deadline id -> timestamp of a popup that may
            still be on screen
        last_task_start_popup: description of the last task announced
    """

    def __init__(
        self,
        schedule: Schedule,
        notifier: Notifier,
        check_interval: float = CHECK_INTERVAL_SECS,
        deadline_cooldown: float = DEADLINE_COOLDOWN_SECS,
        popup_display: float = POPUP_DISPLAY_SECS,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """
        Initialize the loop.

        Args:
            schedule: Loaded schedule; its tasks are mutated in place
            notifier: Popup/alarm/prompt sink
            check_interval: Seconds to sleep between ticks
            deadline_cooldown: Minimum seconds between alerts for one deadline
            popup_display: Seconds a deadline popup is considered on screen
            clock: Returns the current local time, injected for testability
        """
        self.tasks: List[Task] = schedule.tasks
        self.deadlines: List[Deadline] = schedule.deadlines
        self._latest_end = schedule.latest_end
        self.notifier = notifier
        self.check_interval = check_interval
        self.deadline_cooldown = deadline_cooldown
        self.popup_display = popup_display
        self._clock = clock

        self.last_deadline_shown: Dict[str, float] = {}
        self.pending_deadline_popups: Dict[str, float] = {}
        self.last_task_start_popup: Optional[str] = None

        self._stop_event = threading.Event()

        logger.info(
            f"ReminderLoop initialized ({len(self.tasks)} tasks, "
            f"{len(self.deadlines)} deadlines, interval={check_interval}s)"
        )

    # ------------------------------------------------------------------
    # Interruption
    # ------------------------------------------------------------------

    def request_stop(self):
        """
        Ask the loop to stop.

        Safe to call from a signal handler. Observed at the top of the
        next tick; the caller still runs the normal shutdown path.
        """
        self._stop_event.set()

    @property
    def stop_requested(self) -> bool:
        return self._stop_event.is_set()

    # ------------------------------------------------------------------
    # Main loop
    # ------------------------------------------------------------------

    def mark_deadlines_shown(self, now: datetime):
        """Treat every deadline as just shown (e.g. after the startup listing)"""
        now_ts = now.timestamp()
        for deadline in self.deadlines:
            self.last_deadline_shown[deadline.id] = now_ts

    def run(self) -> bool:
        """
        Tick until every task has passed or a stop is requested.

        Returns:
            True if the day finished, False if interrupted
        """
        logger.info("Reminder loop started")

        while not self._stop_event.is_set():
            if self.tick(self._clock()):
                logger.info("All tasks have passed, reminder loop finished")
                return True
            self._stop_event.wait(self.check_interval)

        logger.info("Reminder loop interrupted")
        return False

    def tick(self, now: datetime) -> bool:
        """
        Evaluate one tick at a fixed instant.

        Args:
            now: The time sampled for this whole tick

        Returns:
            True if the loop should exit
        """
        now_ts = now.timestamp()
        now_seconds = seconds_since_midnight(now.time())

        self._expire_pending_popups(now_ts)
        self._check_deadlines(now_ts, now.date())

        for task in self.tasks:
            self._advance_task(task, now_seconds)

        return self.should_exit(now)

    def should_exit(self, now: datetime) -> bool:
        """Every task window has ended and we are strictly past the latest end"""
        if self._latest_end is None:
            return False

        now_seconds = seconds_since_midnight(now.time())
        if not all(task.has_ended(now_seconds) for task in self.tasks):
            return False

        return now.time() > self._latest_end

    # ------------------------------------------------------------------
    # Deadlines
    # ------------------------------------------------------------------

    def _expire_pending_popups(self, now_ts: float):
        self.pending_deadline_popups = {
            key: ts
            for key, ts in self.pending_deadline_popups.items()
            if now_ts - ts < self.popup_display
        }

    def _deadline_due(self, deadline: Deadline, now_ts: float) -> bool:
        if deadline.id in self.pending_deadline_popups:
            return False

        last_shown = self.last_deadline_shown.get(deadline.id)
        if last_shown is None:
            return True
        return now_ts - last_shown >= self.deadline_cooldown

    def _check_deadlines(self, now_ts: float, today: date):
        for deadline in self.deadlines:
            if not self._deadline_due(deadline, now_ts):
                continue

            self.notifier.notify_info(deadline_message(deadline, today))
            self.notifier.play_alert()
            self.last_deadline_shown[deadline.id] = now_ts
            self.pending_deadline_popups[deadline.id] = now_ts

            logger.info(
                f"Deadline alert: {deadline.description} "
                f"({deadline.days_left(today)} days left)"
            )

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------

    def _advance_task(self, task: Task, now_seconds: int):
        # Task should start now - popup and alarm
        if task.is_active(now_seconds) and not task.started:
            task.started = True
            logger.info(f"Task started: {task.description}")

            if self.last_task_start_popup != task.description:
                self.notifier.notify_info(task_start_message(task))
                self.notifier.play_alert()
                self.last_task_start_popup = task.description

        # Task just ended - ask if completed
        if (
            task.started
            and not task.completed
            and not task.completed_asked
            and task.has_ended(now_seconds)
        ):
            task.completed_asked = True
            self._ask_completion(task)

    def _ask_completion(self, task: Task):
        """Blocks until the user answers"""
        if self.notifier.ask_yes_no(completion_question(task)):
            self.notifier.notify_info(COMPLETION_CHEER)
            self.notifier.play_alert()
            task.completed = True
            logger.info(f"Task completed: {task.description}")
        else:
            task.reason = self.notifier.ask_text(reason_question(task))
            task.completed = False
            logger.info(f"Task not completed: {task.description} (reason: {task.reason})")
