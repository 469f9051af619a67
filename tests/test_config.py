import pytest

from panel_interview.config import InterviewSettings, PanelConfig, get_config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ["PANEL_ORACLE_BACKEND", "OLLAMA_URL", "OLLAMA_MODEL", "GOOGLE_CLOUD_PROJECT",
                 "GOOGLE_APPLICATION_CREDENTIALS", "PANEL_API_URL", "PANEL_USER_ID",
                 "PANEL_LOG_FILE", "PANEL_LOG_LEVEL"]:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    config = get_config()
    assert config.oracle_backend == "ollama"
    assert config.ollama_url == "http://localhost:11434"
    assert config.panel.settle_delay == 1.5
    assert config.panel.interrupter_cooldown == 3.0
    assert config.panel.tick_interval == 4.0
    assert config.panel.observer_threshold == 0.7
    assert config.panel.interruption_threshold == 0.8
    assert config.panel.min_interrupt_chars == 20


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("OLLAMA_MODEL", "mistral:7b")
    monkeypatch.setenv("PANEL_USER_ID", "user-42")
    monkeypatch.setenv("PANEL_LOG_LEVEL", "debug")
    config = get_config()
    assert config.ollama_model == "mistral:7b"
    assert config.user_id == "user-42"
    assert config.log_level == "DEBUG"


def test_vertex_requires_project(monkeypatch):
    monkeypatch.setenv("PANEL_ORACLE_BACKEND", "vertex")
    with pytest.raises(ValueError, match="GOOGLE_CLOUD_PROJECT"):
        get_config()
    monkeypatch.setenv("GOOGLE_CLOUD_PROJECT", "proj")
    assert get_config().google_cloud_project == "proj"


def test_unknown_backend(monkeypatch):
    monkeypatch.setenv("PANEL_ORACLE_BACKEND", "openai")
    with pytest.raises(ValueError):
        get_config()


def test_interview_settings_validation():
    assert InterviewSettings("rapid_fire", "easy").type_label == "rapid fire"
    with pytest.raises(ValueError):
        InterviewSettings("trivia", "easy")
    with pytest.raises(ValueError):
        InterviewSettings("behavioral", "impossible")
    assert PanelConfig().settings == InterviewSettings("behavioral", "medium")
