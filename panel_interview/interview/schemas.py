"""
Session state, scorecard schema and best-effort parsers for oracle output.
"""
import re
import json
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Generic, List, Optional, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, AliasChoices, ValidationError

from .models import InterviewerId, Turn, Interruption


class PanelPhase(str, Enum):
    """Lifecycle of one panel interview attempt."""
    INTRO = "intro"
    ACTIVE = "active"
    PROCESSING = "processing"
    FEEDBACK = "feedback"


class InvalidPhaseError(RuntimeError):
    """An operation was called in a phase that does not allow it."""

    def __init__(self, operation: str, phase: PanelPhase):
        super().__init__(f"Cannot {operation} while the panel is in the '{phase.value}' phase")
        self.operation = operation
        self.phase = phase


# =============================================================================
# Scorecard
# =============================================================================

class WeaknessRadar(BaseModel):
    """Five-axis weakness radar, 0-100 per axis (not range-checked)."""
    model_config = ConfigDict(populate_by_name=True)

    clarity: float = 0.0
    structure: float = 0.0
    technical_depth: float = Field(0.0, alias="technicalDepth")
    confidence: float = 0.0
    relevance: float = 0.0


class InterviewerFeedback(BaseModel):
    """One line of feedback from each panelist."""
    lead: str = ""
    interrupter: str = Field("", validation_alias=AliasChoices("interrupter", "interruptor"))
    observer: str = ""


class Scorecard(BaseModel):
    """Final assessment of a panel interview.

    Field names are snake_case in Python and camelCase on the wire, matching
    what the oracle is asked to produce and what the persistence API stores.
    """
    model_config = ConfigDict(populate_by_name=True)

    overall_score: float = Field(alias="overallScore")
    confidence_score: float = Field(alias="confidenceScore")
    communication_score: float = Field(alias="communicationScore")
    technical_score: float = Field(alias="technicalScore")
    strengths: List[str] = Field(default_factory=list)
    improvements: List[str] = Field(default_factory=list)
    summary: str = ""
    weakness_radar: WeaknessRadar = Field(default_factory=WeaknessRadar, alias="weaknessRadar")
    interviewer_feedback: InterviewerFeedback = Field(default_factory=InterviewerFeedback, alias="interviewerFeedback")

    def to_wire(self) -> Dict[str, Any]:
        """camelCase dict for JSON payloads."""
        return self.model_dump(by_alias=True)


# =============================================================================
# Session state
# =============================================================================

@dataclass
class PanelSession:
    """Working memory of one panel interview attempt.

    Owned by the PanelStateMachine; nothing else writes to it.
    """
    session_id: str = field(default_factory=lambda: f"panel-{uuid.uuid4().hex[:12]}")
    phase: PanelPhase = PanelPhase.INTRO
    current_speaker_id: InterviewerId = InterviewerId.LEAD
    current_question: str = ""
    history: List[Turn] = field(default_factory=list)
    interruptions: List[Interruption] = field(default_factory=list)
    is_capturing: bool = False
    generation: int = 0
    scorecard: Optional[Scorecard] = None
    started_at: Optional[float] = None
    ended_at: Optional[float] = None

    def record_turn(self, turn: Turn) -> None:
        self.history.append(turn)

    def record_interruption(self, interruption: Interruption) -> None:
        self.interruptions.append(interruption)

    @property
    def duration_seconds(self) -> Optional[float]:
        if self.started_at is None:
            return None
        return (self.ended_at or time.time()) - self.started_at

    def get_status(self) -> Dict[str, Any]:
        """Snapshot of the session for display and logging."""
        return {
            "session_id": self.session_id,
            "phase": self.phase.value,
            "current_speaker_id": self.current_speaker_id.value,
            "current_question": self.current_question,
            "turns": len(self.history),
            "interruptions": len(self.interruptions),
            "is_capturing": self.is_capturing,
            "has_scorecard": self.scorecard is not None,
        }


# =============================================================================
# Best-effort parsing of oracle output
# =============================================================================

T = TypeVar("T")


@dataclass(frozen=True)
class Parsed(Generic[T]):
    """Extraction succeeded."""
    value: T


@dataclass(frozen=True)
class ParseFailed:
    """Extraction failed; ``reason`` says why, ``raw`` is what we were given."""
    reason: str
    raw: str = ""


ParseResult = Union[Parsed[T], ParseFailed]

_LABEL_RE = re.compile(r"^\s*(?:question|q\d*|lead|observer|interviewer|sarah|lisa|mike)\s*\d*\s*[:\-]\s*", re.IGNORECASE)
_QUESTION_RE = re.compile(r"[^.?!\s][^.?!]*\?")
_SENTENCE_RE = re.compile(r"[^.?!\s][^.?!]*[.!]")
_MIN_QUESTION_CHARS = 10


def parse_question(raw: str) -> ParseResult[str]:
    """
    Pull one question out of free-form oracle text.

    The first ``?``-terminated clause wins; failing that, the first
    sentence-terminated clause (imperatives such as "Tell me about...").
    Labels, code fences and wrapping quotes are stripped first.
    """
    if not raw or not raw.strip():
        return ParseFailed("empty response", raw or "")

    lines = [line for line in raw.replace("```", "").splitlines() if line.strip()]
    text = " ".join(_LABEL_RE.sub("", line).strip() for line in lines)
    text = " ".join(text.split()).strip().strip('"').strip("'").strip()

    match = _QUESTION_RE.search(text) or _SENTENCE_RE.search(text)
    if not match:
        return ParseFailed("no sentence-terminated clause", raw)

    question = match.group(0).strip().strip('"').strip("'").strip()
    if len(question) < _MIN_QUESTION_CHARS:
        return ParseFailed(f"clause too short: {question!r}", raw)
    return Parsed(question)


def parse_scorecard(raw: str) -> ParseResult[Scorecard]:
    """
    Decode a Scorecard from the first ``{`` ... last ``}`` span of the text.

    The oracle is asked for JSON only but often wraps it in prose, so the
    whole response is never parsed directly.
    """
    if not raw:
        return ParseFailed("empty response", raw or "")

    start = raw.find("{")
    end = raw.rfind("}")
    if start == -1 or end == -1 or end < start:
        return ParseFailed("No JSON in response", raw)

    try:
        data = json.loads(raw[start:end + 1])
    except json.JSONDecodeError as e:
        return ParseFailed(f"Failed to parse JSON: {e}", raw)

    if not isinstance(data, dict):
        return ParseFailed("JSON is not an object", raw)

    try:
        return Parsed(Scorecard.model_validate(data))
    except ValidationError as e:
        return ParseFailed(f"Invalid scorecard structure: {e.error_count()} error(s)", raw)
