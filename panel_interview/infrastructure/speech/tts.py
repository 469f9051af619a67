"""
Text-to-speech functionality using Google Cloud TTS.
"""
import os
import subprocess
import tempfile
import logging

from google.cloud import texttospeech

from ...config import TTS_VOICE, LANGUAGE_CODE

logger = logging.getLogger("speech_tts")

# Tried in order until one exists on this machine
PLAYERS = (["afplay"], ["aplay", "-q"])


def _play_wav(wav_path: str) -> bool:
    for player in PLAYERS:
        try:
            subprocess.run(player + [wav_path], check=True, capture_output=True)
            return True
        except FileNotFoundError:
            continue
        except subprocess.CalledProcessError as e:
            logger.warning(f"{player[0]} failed: {e}")
            return False
    return False


def tts_say(text: str, voice: str = TTS_VOICE, language_code: str = LANGUAGE_CODE) -> bool:
    """
    Speak ``text`` with Google Cloud Text-to-Speech through the local audio player.

    Blocks until playback finishes. Returns False when nothing could be played,
    so the caller can fall back to printing.
    """
    if not text.strip():
        return True

    try:
        client = texttospeech.TextToSpeechClient()
        response = client.synthesize_speech(
            input=texttospeech.SynthesisInput(text=text),
            voice=texttospeech.VoiceSelectionParams(language_code=language_code, name=voice),
            audio_config=texttospeech.AudioConfig(
                audio_encoding=texttospeech.AudioEncoding.LINEAR16,
                sample_rate_hertz=16000
            ),
        )
    except Exception as e:
        logger.error(f"Google TTS failed: {e}")
        return False

    with tempfile.NamedTemporaryFile(suffix='.wav', delete=False) as tmp_file:
        wav_path = tmp_file.name
        tmp_file.write(response.audio_content)

    try:
        return _play_wav(wav_path)
    finally:
        try:
            os.unlink(wav_path)
        except OSError:
            pass
