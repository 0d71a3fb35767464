"""
RemindR Notifier - Popups, Alarms and Prompts

This is NOT scheduling logic - it is pure OS glue.

Interface (what the reminder loop depends on):
- notify_info(message)  non-blocking, fire-and-forget
- play_alert()          non-blocking, fire-and-forget
- ask_yes_no(question)  blocking, always returns a bool (False on failure)
- ask_text(question)    blocking, returns None for "no answer"

DesktopNotifier transport:
- zenity dialogs when a display is available
- paplay sound files, else `beep` and the terminal bell
- terminal prompts when no dialog can be shown

Safety Rules:
- Every external action is attempted once
- Failures are logged and absorbed with a default, never raised
"""

import logging
import subprocess
import sys
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Sequence

from .environment import AUDIO_TOOL, BEEP_TOOL, DIALOG_TOOL, Environment

logger = logging.getLogger(__name__)

POPUP_TIMEOUT_SECS = 10

SOUND_PATHS = (
    "/usr/share/sounds/freedesktop/stereo/complete.oga",
    "/usr/share/sounds/freedesktop/stereo/bell.oga",
    "/usr/share/sounds/ubuntu/stereo/bells.oga",
    "/usr/share/sounds/freedesktop/stereo/alarm-clock-elapsed.oga",
)

REASON_DIALOG_TITLE = "Task Incomplete Reason"


class Notifier(ABC):
    """
    Capability-shaped sink used by the reminder loop.

    Implementations must never raise from these methods.
    """

    @abstractmethod
    def notify_info(self, message: str) -> None:
        pass

    @abstractmethod
    def play_alert(self) -> None:
        pass

    @abstractmethod
    def ask_yes_no(self, question: str) -> bool:
        pass

    @abstractmethod
    def ask_text(self, question: str) -> Optional[str]:
        pass


def _normalize_answer(text: Optional[str]) -> Optional[str]:
    """Empty answers mean 'no answer'"""
    if text is None:
        return None
    text = text.strip()
    return text or None


class DesktopNotifier(Notifier):
    """
    Desktop transport with terminal fallbacks.

    Args:
        env: Capabilities detected at startup
        voice: Optional VoiceOutputManager; info messages are also spoken
        sound_paths: Candidate alarm sounds, first existing one wins
    """

    def __init__(
        self,
        env: Environment,
        voice=None,
        sound_paths: Sequence[str] = SOUND_PATHS,
    ):
        self.env = env
        self.voice = voice
        self.sound_paths = tuple(sound_paths)

    # ------------------------------------------------------------------
    # Non-blocking
    # ------------------------------------------------------------------

    def notify_info(self, message: str) -> None:
        if self.env.has_dialog:
            self._spawn([
                DIALOG_TOOL, "--info",
                "--text", message,
                f"--timeout={POPUP_TIMEOUT_SECS}",
            ])
        else:
            try:
                print(f"\n{message}\n", flush=True)
            except (OSError, ValueError) as e:
                logger.debug(f"Terminal notification failed: {e}")

        if self.voice is not None:
            try:
                self.voice.speak(message)
            except Exception as e:
                logger.warning(f"Spoken announcement failed: {e}")

    def play_alert(self) -> None:
        if self.env.has_audio:
            sound = self._find_sound()
            if sound and self._spawn([AUDIO_TOOL, sound]):
                return
            self._spawn([BEEP_TOOL])

        # Terminal bell as final fallback
        try:
            sys.stdout.write("\a")
            sys.stdout.flush()
        except (OSError, ValueError) as e:
            logger.debug(f"Terminal bell failed: {e}")

    # ------------------------------------------------------------------
    # Blocking
    # ------------------------------------------------------------------

    def ask_yes_no(self, question: str) -> bool:
        if self.env.has_dialog:
            try:
                # Own session: Ctrl+C stops the loop, not the open dialog
                result = subprocess.run(
                    [
                        DIALOG_TOOL, "--question",
                        "--text", question,
                        "--ok-label=Yes",
                        "--cancel-label=No",
                    ],
                    stdout=subprocess.DEVNULL,
                    stderr=subprocess.DEVNULL,
                    start_new_session=True,
                )
                return result.returncode == 0
            except (OSError, subprocess.SubprocessError) as e:
                logger.warning(f"Question dialog failed, using terminal: {e}")

        answer = self._read_terminal(f"\n{question} (y/n): ")
        if answer is None:
            return False
        return answer.strip().lower() in ("y", "yes")

    def ask_text(self, question: str) -> Optional[str]:
        if self.env.has_dialog:
            try:
                result = subprocess.run(
                    [
                        DIALOG_TOOL, "--entry",
                        "--text", question,
                        "--title", REASON_DIALOG_TITLE,
                    ],
                    stdout=subprocess.PIPE,
                    stderr=subprocess.DEVNULL,
                    start_new_session=True,
                    text=True,
                )
                return _normalize_answer(result.stdout)
            except (OSError, subprocess.SubprocessError) as e:
                logger.warning(f"Entry dialog failed, using terminal: {e}")

        return _normalize_answer(self._read_terminal(f"\n{question}\n"))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _find_sound(self) -> Optional[str]:
        for sound_path in self.sound_paths:
            if Path(sound_path).exists():
                return sound_path
        return None

    def _spawn(self, command: Sequence[str]) -> bool:
        """Launch a detached process; the loop never waits on it"""
        try:
            subprocess.Popen(
                list(command),
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
            logger.debug(f"Launched: {command[0]}")
            return True
        except (OSError, subprocess.SubprocessError) as e:
            logger.warning(f"Failed to launch {command[0]}: {e}")
            return False

    def _read_terminal(self, prompt: str) -> Optional[str]:
        try:
            return input(prompt)
        except (EOFError, OSError) as e:
            logger.warning(f"No terminal answer: {e!r}")
            return None
