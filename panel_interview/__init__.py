"""
Panel Interview: a three-interviewer mock interview panel.

A Lead asks the primary questions, an Observer follows up on answers and a
Challenger interrupts, all driven by a text-completion model; a scorecard is
produced when the interview ends.
"""

__version__ = "1.0.0"

# Main entry points
from .interview.orchestrator import PanelStateMachine
from .interview.schemas import PanelPhase, Scorecard
from .interview.models import Turn, Interruption, InterviewerId

__all__ = ["PanelStateMachine", "PanelPhase", "Scorecard", "Turn", "Interruption", "InterviewerId"]
