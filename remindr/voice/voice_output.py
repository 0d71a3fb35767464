"""
RemindR Voice Output - Spoken Announcements

Responsibilities:
- Queue announcements for speaking
- Speak in background thread
- Never block the reminder loop
- Handle engine errors gracefully

Architecture:
- Loop thread: queues text via speak()
- TTS thread: owns the pyttsx3 engine, consumes the queue
"""

import logging
import re
import threading
from queue import Queue, Empty

import pyttsx3

logger = logging.getLogger(__name__)

DEFAULT_RATE = 175

# Emoji and other pictographs read badly through TTS
_UNSPEAKABLE = re.compile(r"[^\w\s.,:;!?'\"()%/-]+")


def speakable(text: str) -> str:
    """Strip pictographs and collapse whitespace for the TTS engine"""
    text = _UNSPEAKABLE.sub(" ", text)
    return " ".join(text.split())


class VoiceOutputManager:
    """
    Non-blocking TTS manager.

    Design:
    - Lightweight wrapper around pyttsx3
    - Background worker thread
    - Queue-based so the caller never waits on speech
    """

    def __init__(self, rate: int = DEFAULT_RATE):
        """
        Initialize TTS worker.

        Args:
            rate: Speech rate (words per minute, default: 175)
        """
        self.tts_queue: Queue = Queue()
        self._shutdown = threading.Event()
        # Set once the worker exits; nothing drains the queue after that
        self._worker_stopped = threading.Event()
        self._rate = rate

        self.tts_thread = threading.Thread(
            target=self._tts_worker,
            daemon=True,
            name="RemindR-TTS"
        )
        self.tts_thread.start()

        logger.info(f"VoiceOutputManager initialized (rate={rate})")

    def speak(self, text: str):
        """Queue text for speaking (non-blocking)"""
        if self._worker_stopped.is_set():
            logger.debug("TTS worker not running, announcement dropped")
            return

        text = speakable(text or "")
        if not text:
            return

        self.tts_queue.put(text)
        logger.debug(f"Queued TTS: {text[:50]}")

    def _init_engine(self):
        engine = pyttsx3.init()
        engine.setProperty('rate', self._rate)
        return engine

    def _tts_worker(self):
        """Consume the queue until shutdown"""
        engine = None

        try:
            engine = self._init_engine()
            logger.info("TTS engine initialized")

            while not self._shutdown.is_set():
                try:
                    # Timeout so shutdown is noticed
                    text = self.tts_queue.get(timeout=0.5)
                except Empty:
                    continue

                try:
                    logger.info(f"Speaking: {text}")
                    engine.say(text)
                    engine.runAndWait()
                except Exception as e:
                    logger.error(f"TTS error: {e}", exc_info=True)
                    try:
                        engine.stop()
                        engine = self._init_engine()
                        logger.info("TTS engine reinitialized after error")
                    except Exception:
                        logger.error("Failed to reinitialize TTS engine", exc_info=True)

        except Exception as e:
            # No audio driver; announcements are silently dropped
            logger.warning(f"TTS worker initialization failed: {e}")

        finally:
            if engine is not None:
                try:
                    engine.stop()
                except Exception:
                    logger.debug("TTS engine stop failed", exc_info=True)
            self._worker_stopped.set()
            logger.info("TTS worker shutting down")

    def shutdown(self):
        """Signal the worker to stop and wait briefly for it"""
        logger.info("Shutting down VoiceOutputManager")
        self._shutdown.set()

        if self.tts_thread.is_alive():
            self.tts_thread.join(timeout=2.0)

            if self.tts_thread.is_alive():
                logger.warning("TTS worker thread did not stop cleanly")
