"""
Data models for the panel interview.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple


class InterviewerId(str, Enum):
    """The three seats on the panel."""
    LEAD = "lead"
    INTERRUPTER = "interrupter"
    OBSERVER = "observer"


class InterviewerRole(str, Enum):
    """How a panelist behaves during the interview."""
    MAIN = "main"
    INTERRUPT = "interrupt"
    OBSERVE = "observe"


@dataclass(frozen=True)
class Interviewer:
    """A panelist persona. Created once, never changed."""
    id: InterviewerId
    name: str
    role: InterviewerRole
    title: str
    description: str
    personality: str


@dataclass(frozen=True)
class Turn:
    """One finalized question/answer exchange."""
    question: str
    answer: str
    speaker_id: InterviewerId


@dataclass(frozen=True)
class Interruption:
    """A challenge thrown in by the Interrupter while the Lead's turn is still open."""
    timestamp: float
    message: str
    interviewer_id: InterviewerId = InterviewerId.INTERRUPTER


PANEL: Tuple[Interviewer, ...] = (
    Interviewer(
        id=InterviewerId.LEAD,
        name="Sarah",
        role=InterviewerRole.MAIN,
        title="Lead Interviewer",
        description="Asks main questions and guides the interview flow",
        personality="Professional and thorough",
    ),
    Interviewer(
        id=InterviewerId.INTERRUPTER,
        name="Mike",
        role=InterviewerRole.INTERRUPT,
        title="The Challenger",
        description="Throws curveballs and challenges your answers",
        personality="Direct and probing",
    ),
    Interviewer(
        id=InterviewerId.OBSERVER,
        name="Lisa",
        role=InterviewerRole.OBSERVE,
        title="The Observer",
        description="Listens carefully and asks follow-up questions",
        personality="Analytical and detail-oriented",
    ),
)

PANEL_BY_ID: Dict[InterviewerId, Interviewer] = {p.id: p for p in PANEL}


def get_interviewer(interviewer_id: InterviewerId) -> Interviewer:
    """Look up a panelist by id."""
    return PANEL_BY_ID[InterviewerId(interviewer_id)]
