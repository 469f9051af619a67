"""Panel interview components.

This module contains the business logic for running a three-interviewer
mock panel: the state machine, question generation, the interruption clock
and feedback synthesis.
"""

# Core state machine
from .orchestrator import PanelStateMachine

# Data models
from .models import InterviewerId, InterviewerRole, Interviewer, Turn, Interruption, PANEL, get_interviewer

# Session state, scorecard and parsers
from .schemas import (
    PanelPhase, PanelSession, InvalidPhaseError,
    Scorecard, WeaknessRadar, InterviewerFeedback,
    Parsed, ParseFailed, parse_question, parse_scorecard
)

# Service classes
from .services import (
    SpeechChannel, TypedSpeechChannel, UnsupportedSpeechChannel,
    TTSService, PersistenceService
)

# Question generation, interruptions and feedback
from .question_engine import QuestionEngine, QuestionResult, TurnSelector
from .turn_clock import TurnClock, InterruptionPolicy
from .feedback import FeedbackSynthesizer, SynthesisResult, degraded_scorecard, is_connection_failure

# Event system
from .events import (
    PanelEventBus, EventLogger, PanelMetrics,
    EventType, PanelEvent, PanelStartedEvent, QuestionAskedEvent,
    TurnCompletedEvent, InterruptionFiredEvent, FeedbackReadyEvent,
    SessionResetEvent, ErrorOccurredEvent
)

__all__ = [
    # State machine
    "PanelStateMachine",

    # Data models
    "InterviewerId", "InterviewerRole", "Interviewer", "Turn", "Interruption",
    "PANEL", "get_interviewer",

    # Schemas and state
    "PanelPhase", "PanelSession", "InvalidPhaseError",
    "Scorecard", "WeaknessRadar", "InterviewerFeedback",
    "Parsed", "ParseFailed", "parse_question", "parse_scorecard",

    # Services
    "SpeechChannel", "TypedSpeechChannel", "UnsupportedSpeechChannel",
    "TTSService", "PersistenceService",

    # Engines
    "QuestionEngine", "QuestionResult", "TurnSelector",
    "TurnClock", "InterruptionPolicy",
    "FeedbackSynthesizer", "SynthesisResult", "degraded_scorecard", "is_connection_failure",

    # Events
    "PanelEventBus", "EventLogger", "PanelMetrics",
    "EventType", "PanelEvent", "PanelStartedEvent", "QuestionAskedEvent",
    "TurnCompletedEvent", "InterruptionFiredEvent", "FeedbackReadyEvent",
    "SessionResetEvent", "ErrorOccurredEvent",
]
