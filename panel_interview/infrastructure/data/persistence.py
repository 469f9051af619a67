"""
Records of finished panel interviews and the HTTP store that keeps them.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

import requests

from ...config import API_URL, API_TIMEOUT

logger = logging.getLogger("persistence")


class PersistenceError(RuntimeError):
    """Saving a finished interview failed."""


@dataclass
class QuestionRecord:
    """A question as stored by the interviews API."""
    id: str
    text: str
    type: str
    asked_by: str
    follow_up_to: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        payload = {"id": self.id, "text": self.text, "type": self.type, "askedBy": self.asked_by}
        if self.follow_up_to:
            payload["followUpTo"] = self.follow_up_to
        return payload


@dataclass
class AnswerRecord:
    """The candidate's final transcript for one question."""
    question_id: str
    text: str

    def to_payload(self) -> Dict[str, Any]:
        return {"questionId": self.question_id, "text": self.text}


@dataclass
class PanelInterviewRecord:
    """Complete record of one panel interview, ready to POST."""
    user_id: str
    interview_type: str
    difficulty: str
    started_at: Optional[str] = None  # ISO format timestamp
    ended_at: Optional[str] = None
    questions: List[QuestionRecord] = field(default_factory=list)
    answers: List[AnswerRecord] = field(default_factory=list)
    interruptions: List[Dict[str, Any]] = field(default_factory=list)
    feedback: Optional[Dict[str, Any]] = None  # camelCase scorecard

    def to_payload(self) -> Dict[str, Any]:
        return {
            "userId": self.user_id,
            "config": {"type": self.interview_type, "difficulty": self.difficulty, "mode": "panel"},
            "questions": [q.to_payload() for q in self.questions],
            "answers": [a.to_payload() for a in self.answers],
            "interruptions": self.interruptions,
            "feedback": self.feedback,
            "startedAt": self.started_at,
            "endedAt": self.ended_at,
        }


def iso_timestamp(epoch: Optional[float]) -> Optional[str]:
    return datetime.fromtimestamp(epoch).isoformat() if epoch is not None else None


class InterviewStore:
    """Client for the interviews endpoint of the practice API."""

    def __init__(self, api_url: str = API_URL, timeout: float = API_TIMEOUT, auth_token: Optional[str] = None):
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.auth_token = auth_token

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.auth_token:
            headers["Authorization"] = f"Bearer {self.auth_token}"
        return headers

    def save(self, record: PanelInterviewRecord) -> Dict[str, Any]:
        """
        POST the record to ``{api_url}/interviews``.

        Returns:
            The stored interview as echoed by the API

        Raises:
            PersistenceError: On network failure or a non-2xx status
        """
        url = f"{self.api_url}/interviews"
        try:
            resp = requests.post(url, json=record.to_payload(), headers=self._headers(), timeout=self.timeout)
        except requests.RequestException as e:
            raise PersistenceError(f"Could not reach {url}: {e}") from e

        if resp.status_code >= 400:
            raise PersistenceError(f"Save interview failed with {resp.status_code}: {resp.text[:200]}")

        try:
            body = resp.json()
        except ValueError:
            body = {}
        logger.info(f"Saved panel interview for user {record.user_id}")
        return body.get("interview", body) if isinstance(body, dict) else {}
