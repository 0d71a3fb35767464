"""
RemindR Voice - Optional spoken announcements
"""

from .voice_output import VoiceOutputManager, speakable

__all__ = [
    'VoiceOutputManager',
    'speakable',
]
