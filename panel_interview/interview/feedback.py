"""
Terminal feedback synthesis: one oracle call turns the whole panel into a scorecard.
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from ..config import FEEDBACK_TEMPERATURE, OLLAMA_MODEL
from ..infrastructure.llm import QuestionOracle, OracleUnavailableError
from .models import Turn, Interruption
from .prompts import PanelPrompts
from .schemas import Scorecard, WeaknessRadar, InterviewerFeedback, ParseFailed, parse_scorecard

logger = logging.getLogger("feedback")

FEEDBACK_MAX_TOKENS = 700

# Substrings that mean "nothing answered", whatever client raised them
CONNECTION_FAILURE_MARKERS = (
    "Failed to reach",
    "Failed to fetch",
    "Failed to establish a new connection",
    "Connection refused",
    "ECONNREFUSED",
    "Max retries exceeded",
    "timed out",
)

FEEDBACK_UNAVAILABLE = "AI feedback unavailable - see summary for instructions"

DEFAULT_SETUP_HINT = (
    "1) Install Ollama from ollama.ai, "
    f"2) Run 'ollama pull {OLLAMA_MODEL}', "
    "3) Run 'ollama serve', "
    "4) Redo the interview"
)


class SynthesisError(Exception):
    """The oracle replied but no scorecard could be decoded from it."""


@dataclass(frozen=True)
class SynthesisResult:
    scorecard: Scorecard
    degraded: bool = False
    error: Optional[str] = None


def is_connection_failure(error: BaseException) -> bool:
    """True when ``error`` means the oracle was never reached."""
    if isinstance(error, OracleUnavailableError):
        return True
    text = str(error)
    return any(marker in text for marker in CONNECTION_FAILURE_MARKERS)


def degraded_scorecard(error: BaseException, setup_hint: str = DEFAULT_SETUP_HINT) -> Scorecard:
    """Fixed all-zero scorecard that tells the user how to get real feedback."""
    if is_connection_failure(error):
        improvements = ["Start the feedback engine to get AI-powered feedback. Run: 'ollama serve' in a terminal"]
        summary = f"FEEDBACK ENGINE UNREACHABLE - To get real AI feedback: {setup_hint}"
    else:
        improvements = ["Check the panel log file for error details"]
        summary = f"Feedback engine error: {error}. Check the panel log file for details."

    return Scorecard(
        overall_score=0,
        confidence_score=0,
        communication_score=0,
        technical_score=0,
        strengths=["Interview completed"],
        improvements=improvements,
        summary=summary,
        weakness_radar=WeaknessRadar(),
        interviewer_feedback=InterviewerFeedback(
            lead=FEEDBACK_UNAVAILABLE,
            interrupter=FEEDBACK_UNAVAILABLE,
            observer=FEEDBACK_UNAVAILABLE,
        ),
    )


class FeedbackSynthesizer:
    """Packages history into a single oracle call and decodes the scorecard."""

    def __init__(self, oracle: QuestionOracle, setup_hint: str = DEFAULT_SETUP_HINT):
        self.oracle = oracle
        self.setup_hint = setup_hint

    async def synthesize(self, history: Sequence[Turn], interruptions: Sequence[Interruption]) -> SynthesisResult:
        """
        Build the panel scorecard.

        Never raises: network failures, error statuses, missing JSON and
        invalid structure all produce the degraded scorecard instead.
        """
        prompt = PanelPrompts.feedback(history, len(interruptions))
        logger.info(f"Requesting feedback for {len(history)} turns, {len(interruptions)} interruptions")

        try:
            raw = await asyncio.to_thread(
                self.oracle.generate_content, prompt, FEEDBACK_TEMPERATURE, FEEDBACK_MAX_TOKENS
            )
            logger.debug(f"Raw feedback response: {raw!r}")

            parsed = parse_scorecard(raw)
            if isinstance(parsed, ParseFailed):
                raise SynthesisError(parsed.reason)

            logger.info(f"Feedback parsed, overall score {parsed.value.overall_score}")
            return SynthesisResult(parsed.value)

        except Exception as e:
            logger.error(f"Feedback synthesis failed: {e}")
            return SynthesisResult(degraded_scorecard(e, self.setup_hint), degraded=True, error=str(e))
