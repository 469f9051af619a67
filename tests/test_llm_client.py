from unittest.mock import Mock, patch

import pytest
import requests

from panel_interview.config import Config
from panel_interview.infrastructure.llm import (
    OllamaClient, VertexRestClient, OracleError, OracleUnavailableError, build_oracle
)

POST = "panel_interview.infrastructure.llm.client.requests.post"
GET = "panel_interview.infrastructure.llm.client.requests.get"


def _response(status_code=200, body=None, text=""):
    resp = Mock(status_code=status_code, text=text)
    if body is None:
        resp.json = Mock(side_effect=ValueError("no json"))
    else:
        resp.json = Mock(return_value=body)
    return resp


class TestOllamaClient:

    @patch(POST)
    def test_generate_content(self, mock_post):
        mock_post.return_value = _response(body={"response": "Why do you want this job?"})
        client = OllamaClient(base_url="http://ollama.test:11434/", model="llama3.2:3b")

        text = client.generate_content("prompt", temperature=0.7, max_output_tokens=150)

        assert text == "Why do you want this job?"
        args, kwargs = mock_post.call_args
        assert args[0] == "http://ollama.test:11434/api/generate"
        assert kwargs["json"]["model"] == "llama3.2:3b"
        assert kwargs["json"]["stream"] is False
        assert kwargs["json"]["options"] == {"temperature": 0.7, "top_p": 0.9, "num_predict": 150}

    @patch(POST)
    def test_connection_refused_is_unavailable(self, mock_post):
        mock_post.side_effect = requests.ConnectionError("Connection refused")
        with pytest.raises(OracleUnavailableError, match="Failed to reach"):
            OllamaClient().generate_content("prompt")

    @patch(POST)
    def test_timeout_is_unavailable(self, mock_post):
        mock_post.side_effect = requests.Timeout("read timed out")
        with pytest.raises(OracleUnavailableError):
            OllamaClient().generate_content("prompt")

    @patch(POST)
    def test_error_status(self, mock_post):
        mock_post.return_value = _response(status_code=404, text="model 'x' not found")
        with pytest.raises(OracleError) as exc:
            OllamaClient().generate_content("prompt")
        assert not isinstance(exc.value, OracleUnavailableError)

    @patch(POST)
    def test_non_json_body(self, mock_post):
        mock_post.return_value = _response(text="<html>")
        with pytest.raises(OracleError, match="non-JSON"):
            OllamaClient().generate_content("prompt")

    @patch(POST)
    def test_missing_text(self, mock_post):
        mock_post.return_value = _response(body={"done": True})
        with pytest.raises(OracleError, match="no text"):
            OllamaClient().generate_content("prompt")

    @patch(GET)
    def test_check_connection(self, mock_get):
        mock_get.return_value = Mock(ok=True)
        assert OllamaClient().check_connection()
        mock_get.side_effect = requests.ConnectionError("down")
        assert not OllamaClient().check_connection()

    @patch(GET)
    def test_list_models(self, mock_get):
        mock_get.return_value = Mock(ok=True, json=Mock(return_value={
            "models": [{"name": "llama3.2:3b"}, {"name": "mistral:7b"}]
        }))
        assert OllamaClient().list_models() == ["llama3.2:3b", "mistral:7b"]

    @patch(GET)
    def test_list_models_when_down(self, mock_get):
        mock_get.side_effect = requests.ConnectionError("down")
        assert OllamaClient().list_models() == []


class TestVertexRestClient:

    def test_parse_response_text(self):
        client = VertexRestClient(project="proj")
        body = {"candidates": [{"content": {"parts": [{"text": "What drives you?"}]}}]}
        assert client._parse_response_text(body) == "What drives you?"

    def test_parse_response_without_text(self):
        with pytest.raises(OracleError):
            VertexRestClient(project="proj")._parse_response_text({"candidates": []})

    @patch(POST)
    def test_expired_token_is_cleared(self, mock_post):
        mock_post.return_value = _response(status_code=401, text="unauthenticated")
        client = VertexRestClient(project="proj")
        client._token = "stale"

        with pytest.raises(OracleError):
            client.generate_content("prompt")
        assert client._token is None

    @patch(POST)
    def test_generate_content_body(self, mock_post):
        mock_post.return_value = _response(body={"candidates": [{"content": {"parts": [{"text": "Q?"}]}}]})
        client = VertexRestClient(project="proj", location="europe-west1", model="gemini-x")
        client._token = "tok"

        assert client.generate_content("prompt", temperature=0.2, max_output_tokens=99) == "Q?"
        args, kwargs = mock_post.call_args
        assert args[0].endswith("projects/proj/locations/europe-west1/publishers/google/models/gemini-x:generateContent")
        assert kwargs["headers"]["Authorization"] == "Bearer tok"
        assert kwargs["json"]["generationConfig"] == {"temperature": 0.2, "maxOutputTokens": 99}


def test_build_oracle_picks_backend():
    assert isinstance(build_oracle(Config()), OllamaClient)
    vertex = build_oracle(Config(oracle_backend="vertex", google_cloud_project="proj"))
    assert isinstance(vertex, VertexRestClient)
    with pytest.raises(ValueError):
        build_oracle(Config(oracle_backend="vertex", google_cloud_project=None))
