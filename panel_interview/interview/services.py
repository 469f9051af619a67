"""
Service classes wrapping the panel's external collaborators.
"""
import logging
from typing import Any, Dict, Optional

from ..config import InterviewSettings, TTS_VOICE, LANGUAGE_CODE, USER_ID
from ..infrastructure.speech import tts_say
from ..infrastructure.data import (
    InterviewStore, PanelInterviewRecord, QuestionRecord, AnswerRecord, iso_timestamp
)
from .models import InterviewerId
from .schemas import PanelSession

logger = logging.getLogger("services")


class SpeechChannel:
    """
    One shared answer-capture stream for the whole panel.

    ``interim_transcript`` grows while the candidate is talking;
    ``final_transcript`` accumulates finalized segments until
    ``reset_transcript()`` is called. Subclasses connect a real recognizer.
    """

    is_supported: bool = True

    def __init__(self):
        self.interim_transcript = ""
        self.final_transcript = ""
        self.is_listening = False

    def start(self) -> None:
        self.is_listening = True

    def stop(self) -> None:
        self.is_listening = False

    def reset_transcript(self) -> None:
        self.interim_transcript = ""
        self.final_transcript = ""


class TypedSpeechChannel(SpeechChannel):
    """Console stand-in for a recognizer: each typed line is a finalized segment."""

    def add_line(self, line: str) -> None:
        if not self.is_listening:
            logger.debug("Ignoring typed line while not listening")
            return
        line = line.strip()
        if not line:
            return
        self.final_transcript += line + " "
        # Running text of the turn so far, for the interruption length guard
        self.interim_transcript = self.final_transcript.strip()


class UnsupportedSpeechChannel(SpeechChannel):
    """Used when no recognizer is available; the panel offers no capture."""

    is_supported = False

    def start(self) -> None:
        raise RuntimeError("Speech capture is not supported on this device")


class TTSService:
    """Handles text-to-speech functionality."""

    def __init__(self, use_tts: bool = True, voice: str = TTS_VOICE, language_code: str = LANGUAGE_CODE):
        self.use_tts = use_tts
        self.voice = voice
        self.language_code = language_code

    def speak_or_print(self, message: str, prefix: str = "🤖") -> None:
        """Speak message via TTS, or print it if TTS is disabled or fails."""
        if self.use_tts and tts_say(message, voice=self.voice, language_code=self.language_code):
            return
        print(f"{prefix} {message}")


class PersistenceService:
    """Turns a finished session into a record and hands it to the interviews API."""

    def __init__(self, store: Optional[InterviewStore], user_id: str = USER_ID):
        self.store = store
        self.user_id = user_id

    def build_record(self, session: PanelSession, settings: InterviewSettings) -> PanelInterviewRecord:
        record = PanelInterviewRecord(
            user_id=self.user_id,
            interview_type=settings.interview_type,
            difficulty=settings.difficulty,
            started_at=iso_timestamp(session.started_at),
            ended_at=iso_timestamp(session.ended_at),
            interruptions=[
                {"timestamp": iso_timestamp(i.timestamp), "message": i.message, "interviewerId": i.interviewer_id.value}
                for i in session.interruptions
            ],
            feedback=session.scorecard.to_wire() if session.scorecard else None,
        )

        previous_id = None
        for idx, turn in enumerate(session.history, start=1):
            question_id = f"q{idx}"
            # Observer questions dig into the answer right before them
            follow_up_to = previous_id if turn.speaker_id == InterviewerId.OBSERVER else None
            record.questions.append(QuestionRecord(
                id=question_id,
                text=turn.question,
                type=settings.interview_type,
                asked_by=turn.speaker_id.value,
                follow_up_to=follow_up_to,
            ))
            record.answers.append(AnswerRecord(question_id=question_id, text=turn.answer))
            previous_id = question_id

        return record

    def save_session(self, session: PanelSession, settings: InterviewSettings) -> Dict[str, Any]:
        """
        Save the session.

        Raises:
            PersistenceError: If the API call fails
        """
        if self.store is None:
            logger.info("No interview store configured, session not saved")
            return {}
        return self.store.save(self.build_record(session, settings))
