"""
RemindR Environment - Notification Capability Detection

Detected once at startup, never re-checked during the run.
"""

import logging
import os
import shutil
from dataclasses import dataclass
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

DIALOG_TOOL = "zenity"
AUDIO_TOOL = "paplay"
BEEP_TOOL = "beep"


def is_headless(environ: Optional[Mapping[str, str]] = None) -> bool:
    """True when neither an X11 nor a Wayland display is advertised"""
    if environ is None:
        environ = os.environ
    return "DISPLAY" not in environ and "WAYLAND_DISPLAY" not in environ


@dataclass(frozen=True)
class Environment:
    """
    What the notifier can use on this machine.

    has_dialog is only True when a dialog tool exists AND a display is present.
    """
    has_dialog: bool = False
    has_audio: bool = False
    headless: bool = True

    @classmethod
    def detect(cls, environ: Optional[Mapping[str, str]] = None) -> "Environment":
        headless = is_headless(environ)
        has_zenity = shutil.which(DIALOG_TOOL) is not None
        has_paplay = shutil.which(AUDIO_TOOL) is not None

        env = cls(
            has_dialog=has_zenity and not headless,
            has_audio=has_paplay,
            headless=headless,
        )
        logger.info(
            f"Environment: dialog={env.has_dialog} audio={env.has_audio} "
            f"headless={env.headless}"
        )
        return env
