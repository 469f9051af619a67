"""Text-to-speech playback."""

from .tts import tts_say

__all__ = ["tts_say"]
