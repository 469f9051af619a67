"""Infrastructure components for the panel interview.

This module contains the low-level clients the panel talks to: the
text-completion oracle, speech playback and the interviews API.
"""

from .llm import OllamaClient, VertexRestClient, OracleError, OracleUnavailableError, build_oracle
from .speech import tts_say
from .data import InterviewStore, PanelInterviewRecord, PersistenceError

__all__ = [
    "OllamaClient", "VertexRestClient", "OracleError", "OracleUnavailableError", "build_oracle",
    "tts_say",
    "InterviewStore", "PanelInterviewRecord", "PersistenceError"
]
