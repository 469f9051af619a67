"""
Panel interview state machine.

Three interviewers share one answer-capture channel: the Lead asks the primary
questions, the Observer sometimes follows up on an answer, and the Challenger
cuts in on the Lead's turns from an independent turn clock.
"""
import asyncio
import logging
import random
import time
from typing import Any, Awaitable, Dict, Optional, Set

from ..config import PanelConfig
from ..infrastructure.llm import QuestionOracle
from .models import InterviewerId, Turn, Interruption, get_interviewer
from .schemas import PanelSession, PanelPhase, InvalidPhaseError, Scorecard
from .services import SpeechChannel, TTSService, PersistenceService
from .question_engine import QuestionEngine, QuestionResult, TurnSelector
from .turn_clock import InterruptionPolicy, TurnClock
from .feedback import FeedbackSynthesizer
from .events import (
    PanelEventBus, EventLogger, PanelMetrics,
    PanelStartedEvent, QuestionAskedEvent, TurnCompletedEvent,
    InterruptionFiredEvent, FeedbackReadyEvent, SessionResetEvent,
    ErrorOccurredEvent
)

logger = logging.getLogger("orchestrator")


class PanelStateMachine:
    """
    Drives one panel interview at a time through intro, active, processing
    and feedback.

    The machine is the only writer of its ``session``. Every awaited result
    (oracle questions, feedback) is applied only if the session generation
    it was requested under is still current, so a reset or an ``end()``
    silently discards late answers.
    """

    def __init__(self,
                 oracle: QuestionOracle,
                 speech_channel: SpeechChannel,
                 tts_service: TTSService,
                 persistence: Optional[PersistenceService] = None,
                 event_bus: Optional[PanelEventBus] = None,
                 config: Optional[PanelConfig] = None,
                 rng: Optional[random.Random] = None):
        self.config = config or PanelConfig()
        self.settings = self.config.settings
        self.speech = speech_channel
        self.tts = tts_service
        self.persistence = persistence
        self.rng = rng or random.Random()

        # Initialize event system
        self.event_bus = event_bus or PanelEventBus()
        self.event_logger = EventLogger()
        self.metrics = PanelMetrics()
        self.event_bus.subscribe_all(self.event_logger.handle_event)
        self.event_bus.subscribe_all(self.metrics.handle_event)

        self.question_engine = QuestionEngine(oracle, self.settings)
        self.turn_selector = TurnSelector(self.rng, self.config.observer_threshold)
        self.interruption_policy = InterruptionPolicy(
            self.rng, self.config.interruption_threshold, self.config.min_interrupt_chars
        )
        self.turn_clock = TurnClock(self._on_clock_tick, self.config.tick_interval)
        self.feedback = FeedbackSynthesizer(oracle)

        self.session = PanelSession()
        self._turn_lock = asyncio.Lock()
        self._background: Set[asyncio.Task] = set()

    @property
    def can_capture(self) -> bool:
        return self.speech.is_supported

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def start(self) -> None:
        """Leave the intro: ask the opening question and start the turn clock."""
        session = self.session
        if session.phase != PanelPhase.INTRO:
            raise InvalidPhaseError("start the panel", session.phase)

        session.generation += 1
        generation = session.generation
        session.phase = PanelPhase.ACTIVE
        session.current_speaker_id = InterviewerId.LEAD
        session.started_at = time.time()
        self.event_bus.emit(PanelStartedEvent(
            session.session_id, time.time(), self.settings.interview_type, self.settings.difficulty
        ))
        logger.info(f"Panel {session.session_id} started ({self.settings.difficulty} {self.settings.type_label})")

        result = await self.question_engine.opening_question()
        if not self._is_current(generation):
            logger.info("Discarding opening question for a session that is no longer active")
            return

        self._ask(result)
        self.turn_clock.start()

    async def toggle_capture(self) -> bool:
        """
        Open the answer capture, or close it and move to the next question.

        Returns:
            True if capture state changed; False on devices without capture,
            before the opening question has arrived, or for a toggle queued
            behind a session that has since been discarded
        """
        if self.session.phase != PanelPhase.ACTIVE:
            raise InvalidPhaseError("toggle answer capture", self.session.phase)

        if not self.can_capture:
            logger.warning("Speech capture not supported, ignoring toggle")
            return False

        session = self.session
        # new_interview() swaps in a fresh lock for the next session
        lock = self._turn_lock
        async with lock:
            if self.session is not session:
                logger.info("Ignoring toggle for a discarded session")
                return False
            # Phase may have moved on while waiting for the previous toggle
            if session.phase != PanelPhase.ACTIVE:
                raise InvalidPhaseError("toggle answer capture", session.phase)

            if not session.is_capturing:
                if not session.current_question:
                    logger.warning("No question asked yet, ignoring toggle")
                    return False
                self.speech.reset_transcript()
                self.speech.start()
                session.is_capturing = True
                logger.debug("Answer capture opened")
                return True

            self.speech.stop()
            session.is_capturing = False
            await self._finalize_answer(session)
            return True

    async def end(self) -> Scorecard:
        """Stop the interview and synthesize the scorecard."""
        session = self.session
        if session.phase != PanelPhase.ACTIVE:
            raise InvalidPhaseError("end the panel", session.phase)

        self.turn_clock.stop()
        self._close_capture()

        session.generation += 1
        generation = session.generation
        session.phase = PanelPhase.PROCESSING
        logger.info(f"Panel ended after {len(session.history)} turns, synthesizing feedback")

        result = await self.feedback.synthesize(list(session.history), list(session.interruptions))

        if session.generation != generation or self.session is not session:
            logger.info("Discarding feedback for a session that was reset")
            return result.scorecard

        session.scorecard = result.scorecard
        session.ended_at = time.time()
        session.phase = PanelPhase.FEEDBACK
        self.event_bus.emit(FeedbackReadyEvent(
            session.session_id, time.time(), result.scorecard.overall_score,
            len(session.history), result.degraded
        ))
        if result.degraded:
            self.event_bus.emit(ErrorOccurredEvent(
                session.session_id, time.time(), "FeedbackDegraded", result.error or "", "feedback"
            ))

        if self.persistence is not None:
            self._spawn(self._persist(session), "panel-persist")

        return result.scorecard

    def new_interview(self) -> PanelSession:
        """Discard the current session and return to the intro phase.

        Allowed from any phase; anything still in flight for the old session
        is ignored when it completes.
        """
        old = self.session
        self.turn_clock.stop()
        self._close_capture()
        old.generation += 1

        self.session = PanelSession(generation=old.generation)
        self._turn_lock = asyncio.Lock()
        self.event_bus.emit(SessionResetEvent(
            old.session_id, time.time(), old.phase.value, len(old.history)
        ))
        logger.info(f"Session {old.session_id} discarded, new session {self.session.session_id}")
        return self.session

    # =========================================================================
    # Turn handling
    # =========================================================================

    async def _finalize_answer(self, session: PanelSession) -> None:
        answer = self.speech.final_transcript.strip()
        # The Challenger only ever cuts into Lead turns
        asker = session.current_speaker_id
        if asker == InterviewerId.INTERRUPTER:
            asker = InterviewerId.LEAD

        if answer:
            session.record_turn(Turn(session.current_question, answer, asker))
            self.event_bus.emit(TurnCompletedEvent(
                session.session_id, time.time(), len(session.history), asker.value, answer
            ))
            logger.info(f"Turn {len(session.history)} recorded ({asker.value})")
        else:
            logger.info("Empty answer, no turn recorded")

        generation = session.generation
        previous_question = session.current_question
        await asyncio.sleep(self.config.settle_delay)
        if not self._is_current(generation):
            return

        next_speaker = self.turn_selector.select_next_speaker(asker, answer)
        result = await self.question_engine.next_question(
            next_speaker, previous_question, answer, len(session.history)
        )
        if not self._is_current(generation):
            logger.info(f"Discarding stale {next_speaker.value} question")
            return

        self._ask(result)

    def _ask(self, result: QuestionResult) -> None:
        session = self.session
        session.current_question = result.text
        session.current_speaker_id = result.speaker_id
        self.event_bus.emit(QuestionAskedEvent(
            session.session_id, time.time(), result.speaker_id.value, result.text, result.used_fallback
        ))
        if result.used_fallback:
            self.event_bus.emit(ErrorOccurredEvent(
                session.session_id, time.time(), "QuestionFallback", result.error or "", "question_engine"
            ))
        self._speak(result.speaker_id, result.text)

    async def _on_clock_tick(self) -> None:
        session = self.session
        if (session.phase != PanelPhase.ACTIVE or not session.is_capturing
                or session.current_speaker_id != InterviewerId.LEAD):
            return

        if not self.interruption_policy.should_interrupt(self.speech.interim_transcript):
            return

        message = self.interruption_policy.pick_message()
        session.record_interruption(Interruption(time.time(), message))
        session.current_speaker_id = InterviewerId.INTERRUPTER
        self.event_bus.emit(InterruptionFiredEvent(
            session.session_id, time.time(), message, len(session.interruptions)
        ))
        logger.info(f"Challenger interrupts: {message}")
        self._speak(InterviewerId.INTERRUPTER, message)
        self._spawn(self._cooldown(session, session.generation), "panel-interrupter-cooldown")

    async def _cooldown(self, session: PanelSession, generation: int) -> None:
        await asyncio.sleep(self.config.interrupter_cooldown)
        if (self.session is session and session.generation == generation
                and session.current_speaker_id == InterviewerId.INTERRUPTER):
            session.current_speaker_id = InterviewerId.LEAD
            logger.debug("Floor returned to lead")

    # =========================================================================
    # Helpers
    # =========================================================================

    def _is_current(self, generation: int) -> bool:
        return self.session.generation == generation and self.session.phase == PanelPhase.ACTIVE

    def _close_capture(self) -> None:
        """Close an open capture without turning it into a Turn."""
        if self.session.is_capturing:
            self.speech.stop()
            self.session.is_capturing = False

    def _speak(self, speaker_id: InterviewerId, text: str) -> None:
        prefix = f"🎤 {get_interviewer(speaker_id).name}:"
        self._spawn(asyncio.to_thread(self.tts.speak_or_print, text, prefix), "panel-tts")

    def _spawn(self, coro: Awaitable[Any], name: str) -> asyncio.Task:
        task = asyncio.ensure_future(coro)
        task.set_name(name)
        self._background.add(task)
        task.add_done_callback(self._on_background_done)
        return task

    def _on_background_done(self, task: asyncio.Task) -> None:
        self._background.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error(f"Background task {task.get_name()} failed: {task.exception()}")

    async def _persist(self, session: PanelSession) -> None:
        try:
            await asyncio.to_thread(self.persistence.save_session, session, self.settings)
        except Exception as e:
            logger.error(f"Could not save panel interview: {e}")
            self.event_bus.emit(ErrorOccurredEvent(
                session.session_id, time.time(), type(e).__name__, str(e), "persistence"
            ))

    async def wait_background(self) -> None:
        """Wait for pending speech and persistence tasks."""
        while self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)

    def get_status(self) -> Dict[str, Any]:
        return self.session.get_status()

    def get_metrics(self) -> Dict[str, int]:
        return self.metrics.get_metrics()
