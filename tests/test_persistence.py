from unittest.mock import Mock, patch

import pytest
import requests

from panel_interview.config import InterviewSettings
from panel_interview.infrastructure.data import (
    InterviewStore, PanelInterviewRecord, PersistenceError, QuestionRecord, AnswerRecord
)
from panel_interview.interview.models import InterviewerId, Interruption, Turn
from panel_interview.interview.schemas import PanelSession
from panel_interview.interview.services import PersistenceService


def _record():
    return PanelInterviewRecord(
        user_id="u1",
        interview_type="technical",
        difficulty="hard",
        questions=[QuestionRecord("q1", "How does a hash map work?", "technical", "lead")],
        answers=[AnswerRecord("q1", "It buckets keys by hash")],
    )


def test_payload_shape():
    payload = _record().to_payload()
    assert payload["userId"] == "u1"
    assert payload["config"] == {"type": "technical", "difficulty": "hard", "mode": "panel"}
    assert payload["questions"] == [
        {"id": "q1", "text": "How does a hash map work?", "type": "technical", "askedBy": "lead"}
    ]
    assert payload["answers"] == [{"questionId": "q1", "text": "It buckets keys by hash"}]


@patch("panel_interview.infrastructure.data.persistence.requests.post")
def test_save_posts_to_interviews(mock_post):
    mock_post.return_value = Mock(status_code=201, json=Mock(return_value={"interview": {"_id": "abc"}}))
    store = InterviewStore(api_url="http://api.test/api/", auth_token="tok")

    result = store.save(_record())

    assert result == {"_id": "abc"}
    args, kwargs = mock_post.call_args
    assert args[0] == "http://api.test/api/interviews"
    assert kwargs["headers"]["Authorization"] == "Bearer tok"
    assert kwargs["json"]["userId"] == "u1"


@patch("panel_interview.infrastructure.data.persistence.requests.post")
def test_save_error_status(mock_post):
    mock_post.return_value = Mock(status_code=500, text="Internal Server Error")
    with pytest.raises(PersistenceError, match="500"):
        InterviewStore(api_url="http://api.test/api").save(_record())


@patch("panel_interview.infrastructure.data.persistence.requests.post")
def test_save_network_failure(mock_post):
    mock_post.side_effect = requests.ConnectionError("Connection refused")
    with pytest.raises(PersistenceError, match="Could not reach"):
        InterviewStore(api_url="http://api.test/api").save(_record())


def test_build_record_links_observer_follow_ups():
    session = PanelSession(started_at=1700000000.0, ended_at=1700000600.0)
    session.record_turn(Turn("Tell me about a launch.", "We shipped in March", InterviewerId.LEAD))
    session.record_turn(Turn("Why March?", "The contract said so", InterviewerId.OBSERVER))
    session.record_interruption(Interruption(1700000100.0, "Be specific."))

    record = PersistenceService(store=None, user_id="u2").build_record(session, InterviewSettings())
    payload = record.to_payload()

    assert [q["id"] for q in payload["questions"]] == ["q1", "q2"]
    assert "followUpTo" not in payload["questions"][0]
    assert payload["questions"][1]["followUpTo"] == "q1"
    assert payload["questions"][1]["askedBy"] == "observer"
    assert payload["answers"][1] == {"questionId": "q2", "text": "The contract said so"}
    assert payload["interruptions"][0]["interviewerId"] == "interrupter"
    assert payload["startedAt"] is not None
    assert payload["feedback"] is None


def test_save_without_store_is_skipped():
    assert PersistenceService(store=None).save_session(PanelSession(), InterviewSettings()) == {}
