"""
REST clients for the text-completion oracle that writes panel questions and feedback.
"""
import json
import logging
from typing import Optional, Dict, Any, List, Protocol

import requests
import google.auth
import google.auth.exceptions
import google.auth.transport.requests
from google.oauth2 import service_account

from ...config import (
    OLLAMA_URL, OLLAMA_MODEL, VERTEX_LOCATION, VERTEX_MODEL_NAME,
    LLM_TIMEOUT, MAX_OUTPUT_TOKENS, TOP_P, Config
)

logger = logging.getLogger("llm_client")


class OracleError(RuntimeError):
    """The oracle answered, but not with anything usable."""


class OracleUnavailableError(OracleError):
    """The oracle could not be reached at all (refused, DNS, timeout)."""


class QuestionOracle(Protocol):
    """Anything that turns a prompt into free text."""

    def generate_content(self, prompt_text: str, temperature: float = 0.0,
                         max_output_tokens: int = MAX_OUTPUT_TOKENS) -> str:
        ...


def _post(url: str, timeout: float, **kwargs) -> requests.Response:
    """POST and translate transport failures into OracleUnavailableError."""
    try:
        return requests.post(url, timeout=timeout, **kwargs)
    except (requests.ConnectionError, requests.Timeout) as e:
        raise OracleUnavailableError(f"Failed to reach {url}: {e}") from e


class OllamaClient:
    """Client for a local Ollama server (``/api/generate``, non-streaming)."""

    def __init__(self,
                 base_url: str = OLLAMA_URL,
                 model: str = OLLAMA_MODEL,
                 timeout: int = LLM_TIMEOUT,
                 top_p: float = TOP_P):
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout = timeout
        self.top_p = top_p

    def generate_content(self,
                         prompt_text: str,
                         temperature: float = 0.0,
                         max_output_tokens: int = MAX_OUTPUT_TOKENS) -> str:
        """Generate a completion for ``prompt_text``."""
        url = f"{self.base_url}/api/generate"
        body = {
            "model": self.model,
            "prompt": prompt_text,
            "stream": False,
            "options": {
                "temperature": float(temperature),
                "top_p": float(self.top_p),
                "num_predict": int(max_output_tokens),
            },
        }

        resp = _post(url, self.timeout, json=body)
        if resp.status_code >= 400:
            raise OracleError(f"Ollama API returned {resp.status_code}: {resp.text}")

        try:
            data = resp.json()
        except ValueError as e:
            raise OracleError(f"Ollama returned a non-JSON body: {resp.text[:200]}") from e

        text = data.get("response") or data.get("generated")
        if not isinstance(text, str):
            raise OracleError(f"Ollama response has no text: {json.dumps(data)[:200]}")
        return text

    def check_connection(self) -> bool:
        """True if the Ollama server answers on ``/api/tags``."""
        try:
            resp = requests.get(f"{self.base_url}/api/tags", timeout=5)
            return resp.ok
        except requests.RequestException as e:
            logger.error("Ollama connection failed: %s", e)
            return False

    def list_models(self) -> List[str]:
        """Names of the models installed on the Ollama server."""
        try:
            resp = requests.get(f"{self.base_url}/api/tags", timeout=5)
            if not resp.ok:
                raise OracleError(f"Failed to fetch models: {resp.status_code}")
            return [m.get("name", "") for m in resp.json().get("models", [])]
        except (requests.RequestException, OracleError, ValueError) as e:
            logger.error("Error fetching models: %s", e)
            return []


class VertexRestClient:
    """REST-based client for Vertex AI Gemini models."""

    def __init__(self,
                 project: str,
                 location: str = VERTEX_LOCATION,
                 model: str = VERTEX_MODEL_NAME,
                 credentials_json: Optional[str] = None,
                 timeout: int = LLM_TIMEOUT):
        self.project = project
        self.location = location
        self.model = model
        self.credentials_json = credentials_json
        self.base_url = f"https://{self.location}-aiplatform.googleapis.com/v1"
        self.model_resource = f"projects/{self.project}/locations/{self.location}/publishers/google/models/{self.model}"
        self._token = None
        self.timeout = timeout

    def _refresh_token(self):
        """Refresh the OAuth token for API calls."""
        scopes = ["https://www.googleapis.com/auth/cloud-platform"]
        if self.credentials_json:
            creds = service_account.Credentials.from_service_account_file(self.credentials_json, scopes=scopes)
        else:
            creds, _ = google.auth.default(scopes=scopes)

        try:
            creds.refresh(google.auth.transport.requests.Request())
        except google.auth.exceptions.TransportError as e:
            raise OracleUnavailableError(f"Could not refresh Google credentials: {e}") from e
        self._token = creds.token

    def generate_content(self,
                         prompt_text: str,
                         temperature: float = 0.0,
                         max_output_tokens: int = MAX_OUTPUT_TOKENS) -> str:
        """Generate content using the Vertex AI REST API."""
        if not self._token:
            self._refresh_token()
        url = f"{self.base_url}/{self.model_resource}:generateContent"

        body: Dict[str, Any] = {
            "contents": [{"role": "user", "parts": [{"text": prompt_text}]}],
            "generationConfig": {
                "temperature": float(temperature),
                "maxOutputTokens": int(max_output_tokens),
            },
        }
        headers = {
            "Authorization": f"Bearer {self._token}",
            "Content-Type": "application/json",
        }

        resp = _post(url, self.timeout, headers=headers, json=body)
        if resp.status_code == 401:
            # Token expired mid-session
            self._token = None
        if resp.status_code >= 400:
            raise OracleError(f"Vertex REST error {resp.status_code}: {resp.text}")

        return self._parse_response_text(resp.json())

    def _parse_response_text(self, resp_json: Dict[str, Any]) -> str:
        """Pull the text out of ``candidates[0].content.parts``."""
        for cand in resp_json.get("candidates", [])[:1]:
            content = cand.get("content", {})
            for part in content.get("parts", []) or []:
                if isinstance(part, dict) and isinstance(part.get("text"), str):
                    return part["text"]
            if isinstance(content.get("text"), str):
                return content["text"]

        if isinstance(resp_json.get("text"), str):
            return resp_json["text"]

        raise OracleError(f"Vertex response has no text: {json.dumps(resp_json, separators=(',', ':'))[:200]}")


def build_oracle(config: Config) -> QuestionOracle:
    """Create the oracle client selected by ``config.oracle_backend``."""
    if config.oracle_backend == "vertex":
        if not config.google_cloud_project:
            raise ValueError("project is required for the vertex oracle backend")
        return VertexRestClient(
            project=config.google_cloud_project,
            location=config.vertex_location,
            model=config.vertex_model_name,
            credentials_json=config.google_application_credentials,
        )
    return OllamaClient(base_url=config.ollama_url, model=config.ollama_model)
