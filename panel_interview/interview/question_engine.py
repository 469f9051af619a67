"""
Question generation and turn selection for the panel.
"""
import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Optional

from ..config import InterviewSettings, OBSERVER_THRESHOLD, QUESTION_TEMPERATURE
from ..infrastructure.llm import QuestionOracle
from .models import InterviewerId
from .prompts import PanelPrompts
from .schemas import ParseFailed, parse_question

logger = logging.getLogger("question_engine")

QUESTION_MAX_TOKENS = 150


@dataclass(frozen=True)
class QuestionResult:
    """A question ready to be asked, and whether it came from the canned list."""
    text: str
    speaker_id: InterviewerId
    used_fallback: bool = False
    error: Optional[str] = None


class TurnSelector:
    """
    Decides who asks after an answer is finalized.

    One uniform draw per answer. A draw above the threshold hands the floor to
    the Observer for a clarifying question, unless the Observer just asked.
    The Interrupter never gets a turn here; it only cuts in via the turn clock.

    An empty answer always goes back to the Lead; the draw is still taken.
    """

    def __init__(self, rng: random.Random, observer_threshold: float = OBSERVER_THRESHOLD):
        self.rng = rng
        self.observer_threshold = observer_threshold

    def select_next_speaker(self, current_speaker: InterviewerId, answer: str) -> InterviewerId:
        r = self.rng.random()
        if r > self.observer_threshold and current_speaker != InterviewerId.OBSERVER and answer.strip():
            logger.debug(f"Turn draw {r:.3f} > {self.observer_threshold}: observer follow-up")
            return InterviewerId.OBSERVER
        logger.debug(f"Turn draw {r:.3f}: back to lead")
        return InterviewerId.LEAD


class QuestionEngine:
    """Asks the oracle for panel questions and always comes back with one."""

    def __init__(self, oracle: QuestionOracle, settings: InterviewSettings):
        self.oracle = oracle
        self.settings = settings
        self._fallbacks = PanelPrompts.fallback_messages()

    async def opening_question(self) -> QuestionResult:
        """The Lead's first question, from type and difficulty only."""
        prompt = PanelPrompts.opening_question(self.settings)
        return await self._ask(prompt, InterviewerId.LEAD, self._fallbacks["opening_questions"][0])

    async def lead_question(self, previous_question: str, answer: str, turn_count: int) -> QuestionResult:
        """
        The Lead's next primary question.

        Args:
            previous_question: The question that was just answered
            answer: The candidate's final transcript for it
            turn_count: Number of turns so far, used to rotate canned questions
        """
        prompt = PanelPrompts.lead_continuation(self.settings, previous_question, answer)
        fallbacks = self._fallbacks["lead_questions"]
        return await self._ask(prompt, InterviewerId.LEAD, fallbacks[turn_count % len(fallbacks)])

    async def observer_question(self, answer: str) -> QuestionResult:
        """Lisa's clarifying question about what was just said."""
        prompt = PanelPrompts.observer_follow_up(answer)
        return await self._ask(prompt, InterviewerId.OBSERVER, self._fallbacks["observer_questions"][0])

    async def next_question(self, speaker_id: InterviewerId, previous_question: str,
                            answer: str, turn_count: int) -> QuestionResult:
        """Dispatch to the right generator for ``speaker_id``."""
        if speaker_id == InterviewerId.OBSERVER:
            return await self.observer_question(answer)
        return await self.lead_question(previous_question, answer, turn_count)

    async def _ask(self, prompt: str, speaker_id: InterviewerId, fallback: str) -> QuestionResult:
        try:
            raw = await asyncio.to_thread(
                self.oracle.generate_content, prompt, QUESTION_TEMPERATURE, QUESTION_MAX_TOKENS
            )
        except Exception as e:
            logger.warning(f"Question generation failed for {speaker_id.value}: {e}, using fallback")
            return QuestionResult(fallback, speaker_id, used_fallback=True, error=str(e))

        parsed = parse_question(raw)
        if isinstance(parsed, ParseFailed):
            logger.warning(f"Unusable question from oracle ({parsed.reason}): {raw!r}")
            return QuestionResult(fallback, speaker_id, used_fallback=True, error=parsed.reason)

        logger.info(f"Generated {speaker_id.value} question: {parsed.value}")
        return QuestionResult(parsed.value, speaker_id)
