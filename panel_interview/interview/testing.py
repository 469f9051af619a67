"""
Testing infrastructure with mock services for the panel interview.
"""
import json
import random
from typing import Any, Dict, List, Optional, Sequence, Union

from ..config import PanelConfig, InterviewSettings
from ..infrastructure.data import PersistenceError
from ..infrastructure.llm import OracleUnavailableError
from .services import SpeechChannel, TTSService, PersistenceService

MockResponse = Union[str, BaseException]

DEFAULT_MOCK_QUESTION = "What would you do differently if you faced that situation again?"


class MockOracle:
    """Mock question oracle for testing.

    Items in ``mock_responses`` are returned in order; an exception instance
    is raised instead of returned.
    """

    def __init__(self, mock_responses: Optional[List[MockResponse]] = None):
        self.mock_responses = list(mock_responses or [])
        self.current_response_idx = 0
        self.request_history = []

    def generate_content(self, prompt: str, temperature: float = 0.0, max_output_tokens: int = 512) -> str:
        """Return (or raise) the next scripted response."""
        self.request_history.append({
            "prompt": prompt,
            "temperature": temperature,
            "max_output_tokens": max_output_tokens,
        })

        if self.current_response_idx < len(self.mock_responses):
            response = self.mock_responses[self.current_response_idx]
            self.current_response_idx += 1
            if isinstance(response, BaseException):
                raise response
            return response

        return DEFAULT_MOCK_QUESTION


class UnreachableOracle:
    """Oracle whose server is never up."""

    def __init__(self, url: str = "http://localhost:11434/api/generate"):
        self.url = url
        self.calls = 0

    def generate_content(self, prompt: str, temperature: float = 0.0, max_output_tokens: int = 512) -> str:
        self.calls += 1
        raise OracleUnavailableError(f"Failed to reach {self.url}: Connection refused")


class MockSpeechChannel(SpeechChannel):
    """Mock speech channel driven by the test instead of a microphone."""

    def __init__(self, supported: bool = True):
        super().__init__()
        self.is_supported = supported
        self.start_count = 0
        self.stop_count = 0

    def start(self) -> None:
        self.start_count += 1
        super().start()

    def stop(self) -> None:
        self.stop_count += 1
        super().stop()

    def hear(self, interim: str) -> None:
        """Candidate is mid-sentence."""
        self.interim_transcript = interim

    def say(self, text: str) -> None:
        """Candidate finished a segment; it becomes part of the final transcript."""
        self.final_transcript = f"{self.final_transcript} {text}".strip()
        self.interim_transcript = self.final_transcript


class MockTTSService(TTSService):
    """Mock TTS service for testing."""

    def __init__(self, use_tts: bool = False):
        # Don't call super().__init__ to avoid initializing real TTS
        self.use_tts = use_tts
        self.spoken_messages = []

    def speak_or_print(self, message: str, prefix: str = "🤖") -> None:
        """Mock speak/print behavior."""
        self.spoken_messages.append(message)


class MockPersistenceService(PersistenceService):
    """Mock persistence that keeps saved records in memory."""

    def __init__(self, fail: bool = False, user_id: str = "test-user"):
        # Don't call super().__init__ to avoid creating a real InterviewStore
        self.store = None
        self.user_id = user_id
        self.fail = fail
        self.saved = []

    def save_session(self, session, settings: InterviewSettings) -> Dict[str, Any]:
        if self.fail:
            raise PersistenceError("Save interview failed with 503: Service Unavailable")
        payload = self.build_record(session, settings).to_payload()
        self.saved.append(payload)
        return payload


class ScriptedRandom(random.Random):
    """Random source that replays fixed draws.

    ``random()`` returns ``values`` in order and then ``default``;
    ``choice()`` always picks ``choice_index``.
    """

    def __init__(self, values: Sequence[float] = (), default: float = 0.0, choice_index: int = 0):
        super().__init__(0)
        self.values = list(values)
        self.default = default
        self.choice_index = choice_index
        self.draws = 0

    def random(self) -> float:
        self.draws += 1
        if self.values:
            return self.values.pop(0)
        return self.default

    def choice(self, seq):
        return seq[self.choice_index % len(seq)]


def zero_delay_config(interview_type: str = "behavioral", difficulty: str = "medium") -> PanelConfig:
    """PanelConfig with no settle delay or cooldown, for driving the machine in tests."""
    return PanelConfig(
        settle_delay=0.0,
        interrupter_cooldown=0.0,
        tick_interval=3600.0,
        settings=InterviewSettings(interview_type, difficulty),
    )


def sample_scorecard_json(overall: int = 78) -> str:
    """A well-formed feedback reply, wrapped in prose the way models tend to answer."""
    feedback = {
        "overallScore": overall,
        "confidenceScore": 72,
        "communicationScore": 80,
        "technicalScore": 65,
        "strengths": ["Clear ownership of outcomes", "Concrete team example"],
        "improvements": ["Quantify the impact", "Hold your ground when challenged"],
        "summary": "Solid answers with good structure; push harder on specifics.",
        "weaknessRadar": {
            "clarity": 80,
            "structure": 75,
            "technicalDepth": 60,
            "confidence": 70,
            "relevance": 85,
        },
        "interviewerFeedback": {
            "lead": "Good use of a real example.",
            "interrupter": "Stayed calm under pressure.",
            "observer": "Could give more detail on the hard parts.",
        },
    }
    return "Here is the feedback you asked for:\n" + json.dumps(feedback, indent=2) + "\nGood luck!"
