"""
Tests for RemindR spoken announcements

The pyttsx3 engine is mocked; no audio device is needed.
"""

import sys
import time
import logging
from pathlib import Path
from unittest.mock import MagicMock, patch

print("=" * 70)
print("Starting RemindR Voice Output Tests...")
print("=" * 70)

sys.path.insert(0, str(Path(__file__).parent.parent))

from remindr.voice import VoiceOutputManager, speakable

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def wait_for(condition, timeout=3.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if condition():
            return True
        time.sleep(0.02)
    return False


def test_speakable():
    assert speakable("⏰ Task Starting:\nDrink water") == "Task Starting: Drink water"
    assert speakable("Great! One step closer to your goal 🎉") == "Great! One step closer to your goal"
    assert speakable("⏳ Deadline: Pay rent\n(3 days overdue!)") == "Deadline: Pay rent (3 days overdue!)"
    assert speakable("🎉") == ""
    print("✓ Pictographs stripped")


def test_speaks_in_background():
    engine = MagicMock()
    with patch('pyttsx3.init', return_value=engine):
        voice = VoiceOutputManager(rate=150)
        try:
            voice.speak("⏰ Task Starting:\nRead")
            voice.speak("🎉")
            assert wait_for(lambda: engine.runAndWait.called)
        finally:
            voice.shutdown()

    engine.setProperty.assert_called_with('rate', 150)
    engine.say.assert_called_once_with("Task Starting: Read")
    assert not voice.tts_thread.is_alive()
    print("✓ Queued text spoken on the worker thread")


def test_engine_init_failure_is_absorbed():
    with patch('pyttsx3.init', side_effect=RuntimeError("no driver")):
        voice = VoiceOutputManager()
        assert wait_for(lambda: not voice.tts_thread.is_alive())
        # Queuing after the worker died must not raise
        voice.speak("hello")
        voice.shutdown()
    print("✓ Missing audio driver does not crash")


def test_speech_dropped_once_worker_stopped():
    with patch('pyttsx3.init', side_effect=RuntimeError("no driver")):
        voice = VoiceOutputManager()
        assert wait_for(lambda: not voice.tts_thread.is_alive())
        for _ in range(3):
            voice.speak("⏰ Task Starting: Read")
        assert voice.tts_queue.empty()
        voice.shutdown()
    print("✓ Nothing queued without a worker")


def run_all_tests():
    """Run all voice output tests"""
    test_passed = False
    try:
        test_speakable()
        test_speaks_in_background()
        test_engine_init_failure_is_absorbed()
        test_speech_dropped_once_worker_stopped()
        print("\n✅ ALL VOICE OUTPUT TESTS PASSED")
        test_passed = True
    except AssertionError as e:
        logger.error(f"Assertion failed: {e}", exc_info=True)
    return test_passed


if __name__ == "__main__":
    sys.exit(0 if run_all_tests() else 1)
