"""
Event-driven notifications for the panel interview.
"""
import logging
from typing import Dict, Any, List, Callable, Optional
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger("events")


class EventType(str, Enum):
    """Types of panel events."""
    PANEL_STARTED = "panel_started"
    QUESTION_ASKED = "question_asked"
    TURN_COMPLETED = "turn_completed"
    INTERRUPTION_FIRED = "interruption_fired"
    FEEDBACK_READY = "feedback_ready"
    SESSION_RESET = "session_reset"
    ERROR_OCCURRED = "error_occurred"


@dataclass
class PanelEvent:
    """Base class for all panel events."""
    event_type: EventType
    session_id: str
    timestamp: float
    data: Dict[str, Any]


class PanelStartedEvent(PanelEvent):
    """Fired when the panel leaves the intro phase."""
    def __init__(self, session_id: str, timestamp: float, interview_type: str, difficulty: str):
        super().__init__(
            event_type=EventType.PANEL_STARTED,
            session_id=session_id,
            timestamp=timestamp,
            data={"interview_type": interview_type, "difficulty": difficulty}
        )


class QuestionAskedEvent(PanelEvent):
    """Fired when a new question becomes current."""
    def __init__(self, session_id: str, timestamp: float, speaker_id: str,
                 question: str, used_fallback: bool):
        super().__init__(
            event_type=EventType.QUESTION_ASKED,
            session_id=session_id,
            timestamp=timestamp,
            data={
                "speaker_id": speaker_id,
                "question": question,
                "used_fallback": used_fallback
            }
        )


class TurnCompletedEvent(PanelEvent):
    """Fired when an answer is appended to history."""
    def __init__(self, session_id: str, timestamp: float, turn_idx: int,
                 speaker_id: str, answer: str):
        super().__init__(
            event_type=EventType.TURN_COMPLETED,
            session_id=session_id,
            timestamp=timestamp,
            data={
                "turn_idx": turn_idx,
                "speaker_id": speaker_id,
                "answer": answer
            }
        )


class InterruptionFiredEvent(PanelEvent):
    """Fired when the Challenger cuts into the Lead's turn."""
    def __init__(self, session_id: str, timestamp: float, message: str, count: int):
        super().__init__(
            event_type=EventType.INTERRUPTION_FIRED,
            session_id=session_id,
            timestamp=timestamp,
            data={"message": message, "count": count}
        )


class FeedbackReadyEvent(PanelEvent):
    """Fired when the scorecard is available."""
    def __init__(self, session_id: str, timestamp: float, overall_score: float,
                 turn_count: int, degraded: bool):
        super().__init__(
            event_type=EventType.FEEDBACK_READY,
            session_id=session_id,
            timestamp=timestamp,
            data={
                "overall_score": overall_score,
                "turn_count": turn_count,
                "degraded": degraded
            }
        )


class SessionResetEvent(PanelEvent):
    """Fired when a session is discarded."""
    def __init__(self, session_id: str, timestamp: float, previous_phase: str, turn_count: int):
        super().__init__(
            event_type=EventType.SESSION_RESET,
            session_id=session_id,
            timestamp=timestamp,
            data={"previous_phase": previous_phase, "turn_count": turn_count}
        )


class ErrorOccurredEvent(PanelEvent):
    """Fired when a collaborator fails. Recovered errors are reported too."""
    def __init__(self, session_id: str, timestamp: float, error_type: str,
                 error_message: str, component: str):
        super().__init__(
            event_type=EventType.ERROR_OCCURRED,
            session_id=session_id,
            timestamp=timestamp,
            data={
                "error_type": error_type,
                "error_message": error_message,
                "component": component
            }
        )


EventHandler = Callable[[PanelEvent], None]


class PanelEventBus:
    """Event bus for panel components."""

    def __init__(self):
        self._handlers: Dict[EventType, List[EventHandler]] = {}
        self._global_handlers: List[EventHandler] = []

    def subscribe(self, event_type: EventType, handler: EventHandler) -> None:
        """
        Subscribe to specific event type.

        Args:
            event_type: Type of event to listen for
            handler: Function to call when event occurs
        """
        self._handlers.setdefault(event_type, []).append(handler)
        logger.debug(f"Subscribed handler to {event_type}")

    def subscribe_all(self, handler: EventHandler) -> None:
        """Subscribe to all events."""
        self._global_handlers.append(handler)
        logger.debug("Subscribed global handler")

    def unsubscribe(self, event_type: EventType, handler: EventHandler) -> None:
        """Stop calling ``handler`` for ``event_type``."""
        try:
            self._handlers.get(event_type, []).remove(handler)
            logger.debug(f"Unsubscribed handler from {event_type}")
        except ValueError:
            logger.warning(f"Handler not found for {event_type}")

    def emit(self, event: PanelEvent) -> None:
        """
        Emit an event to all subscribers.

        A failing handler is logged and skipped; it never breaks the panel.
        """
        logger.debug(f"Emitting event: {event.event_type} for session {event.session_id}")

        for handler in self._handlers.get(event.event_type, []) + self._global_handlers:
            try:
                handler(event)
            except Exception as e:
                logger.error(f"Error in event handler for {event.event_type}: {e}")

    def clear_handlers(self) -> None:
        """Clear all event handlers."""
        self._handlers.clear()
        self._global_handlers.clear()


class EventLogger:
    """Logs all events for debugging and analysis."""

    def __init__(self, log_level: int = logging.INFO):
        self.logger = logging.getLogger("event_logger")
        self.log_level = log_level

    def handle_event(self, event: PanelEvent) -> None:
        self.logger.log(self.log_level, f"Event: {event.event_type.value} | Session: {event.session_id} | Data: {event.data}")


class PanelMetrics:
    """Counts what happened across panel sessions."""

    def __init__(self):
        self.reset()

    def reset(self) -> None:
        """Reset all metrics to zero."""
        self.sessions_started = 0
        self.sessions_reset = 0
        self.questions_asked = 0
        self.fallback_questions = 0
        self.turns_completed = 0
        self.interruptions = 0
        self.feedback_ready = 0
        self.degraded_feedback = 0
        self.errors_occurred = 0
        self.last_error: Optional[str] = None

    def handle_event(self, event: PanelEvent) -> None:
        """Update metrics based on event."""
        if event.event_type == EventType.PANEL_STARTED:
            self.sessions_started += 1
        elif event.event_type == EventType.SESSION_RESET:
            self.sessions_reset += 1
        elif event.event_type == EventType.QUESTION_ASKED:
            self.questions_asked += 1
            if event.data.get("used_fallback"):
                self.fallback_questions += 1
        elif event.event_type == EventType.TURN_COMPLETED:
            self.turns_completed += 1
        elif event.event_type == EventType.INTERRUPTION_FIRED:
            self.interruptions += 1
        elif event.event_type == EventType.FEEDBACK_READY:
            self.feedback_ready += 1
            if event.data.get("degraded"):
                self.degraded_feedback += 1
        elif event.event_type == EventType.ERROR_OCCURRED:
            self.errors_occurred += 1
            self.last_error = event.data.get("error_message")

    def get_metrics(self) -> Dict[str, int]:
        """Get current metrics snapshot."""
        return {
            "sessions_started": self.sessions_started,
            "sessions_reset": self.sessions_reset,
            "questions_asked": self.questions_asked,
            "fallback_questions": self.fallback_questions,
            "turns_completed": self.turns_completed,
            "interruptions": self.interruptions,
            "feedback_ready": self.feedback_ready,
            "degraded_feedback": self.degraded_feedback,
            "errors_occurred": self.errors_occurred,
        }
