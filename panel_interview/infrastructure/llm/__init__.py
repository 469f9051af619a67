"""Oracle (LLM) clients."""

from .client import (
    QuestionOracle, OllamaClient, VertexRestClient,
    OracleError, OracleUnavailableError, build_oracle
)

__all__ = [
    "QuestionOracle", "OllamaClient", "VertexRestClient",
    "OracleError", "OracleUnavailableError", "build_oracle"
]
