"""
Panel Interview Configuration
=============================

This file contains ALL configuration for the panel interview system.
- User settings at the top (things users might want to change)
- Internal constants at the bottom (technical defaults)
"""
import os
from dataclasses import dataclass, field
from typing import Optional


# =============================================================================
# USER SETTINGS - Edit these to customize the panel
# =============================================================================

# Oracle backend: "ollama" (local) or "vertex" (Google Cloud)
ORACLE_BACKEND = "ollama"
OLLAMA_URL = "http://localhost:11434"
OLLAMA_MODEL = "llama3.2:3b"

# Only needed for the vertex backend
GOOGLE_CLOUD_PROJECT = None
GOOGLE_APPLICATION_CREDENTIALS = None

# Interview defaults
INTERVIEW_TYPE = "behavioral"
DIFFICULTY = "medium"

# Persistence API
API_URL = "http://localhost:5000/api"
USER_ID = "anonymous"
SAVE_SESSIONS = True

# Speech settings
ENABLE_TTS = False
TTS_VOICE = "en-US-Neural2-F"
LANGUAGE_CODE = "en-US"

# Logging
LOG_FILE = "./_panel/panel.log"
LOG_LEVEL = "INFO"


# =============================================================================
# PANEL TIMING - Turn-taking and interruption tuning
# =============================================================================

# Pause after the answer capture stops before choosing the next speaker
SETTLE_DELAY_SECONDS = 1.5

# How long the Challenger holds the floor before handing back to the Lead
INTERRUPTER_COOLDOWN_SECONDS = 3.0

# How often the turn clock considers an interruption
TURN_CLOCK_INTERVAL_SECONDS = 4.0

# Coin-flip thresholds (draw must exceed the threshold)
OBSERVER_THRESHOLD = 0.7
INTERRUPTION_THRESHOLD = 0.8

# No interruptions until the candidate has said at least this much
MIN_INTERRUPT_TRANSCRIPT_CHARS = 20


# =============================================================================
# INTERNAL CONSTANTS - Don't change these unless you know what you're doing
# =============================================================================

INTERVIEW_TYPES = ("behavioral", "technical", "rapid_fire", "situational", "hr_basics")
DIFFICULTY_LEVELS = ("easy", "medium", "hard")

# LLM
VERTEX_LOCATION = "us-central1"
VERTEX_MODEL_NAME = "gemini-2.5-flash-lite"
LLM_TIMEOUT = 60
MAX_OUTPUT_TOKENS = 512
QUESTION_TEMPERATURE = 0.7
FEEDBACK_TEMPERATURE = 0.7
TOP_P = 0.9

# Persistence
API_TIMEOUT = 10


# =============================================================================
# CONFIG OBJECTS
# =============================================================================

@dataclass
class InterviewSettings:
    """Round settings encoded into every question prompt."""
    interview_type: str = INTERVIEW_TYPE
    difficulty: str = DIFFICULTY

    def __post_init__(self):
        if self.interview_type not in INTERVIEW_TYPES:
            raise ValueError(f"Unknown interview type: {self.interview_type}")
        if self.difficulty not in DIFFICULTY_LEVELS:
            raise ValueError(f"Unknown difficulty: {self.difficulty}")

    @property
    def type_label(self) -> str:
        return self.interview_type.replace("_", " ")


@dataclass
class PanelConfig:
    """Timing and probability knobs for the panel state machine."""
    settle_delay: float = SETTLE_DELAY_SECONDS
    interrupter_cooldown: float = INTERRUPTER_COOLDOWN_SECONDS
    tick_interval: float = TURN_CLOCK_INTERVAL_SECONDS
    observer_threshold: float = OBSERVER_THRESHOLD
    interruption_threshold: float = INTERRUPTION_THRESHOLD
    min_interrupt_chars: int = MIN_INTERRUPT_TRANSCRIPT_CHARS
    settings: InterviewSettings = field(default_factory=InterviewSettings)


@dataclass
class Config:
    """Main configuration object."""
    oracle_backend: str = ORACLE_BACKEND
    ollama_url: str = OLLAMA_URL
    ollama_model: str = OLLAMA_MODEL
    google_cloud_project: Optional[str] = GOOGLE_CLOUD_PROJECT
    google_application_credentials: Optional[str] = GOOGLE_APPLICATION_CREDENTIALS
    vertex_location: str = VERTEX_LOCATION
    vertex_model_name: str = VERTEX_MODEL_NAME
    api_url: str = API_URL
    user_id: str = USER_ID
    save_sessions: bool = SAVE_SESSIONS
    enable_tts: bool = ENABLE_TTS
    tts_voice: str = TTS_VOICE
    language_code: str = LANGUAGE_CODE
    log_file: str = LOG_FILE
    log_level: str = LOG_LEVEL
    panel: PanelConfig = field(default_factory=PanelConfig)


def get_config() -> Config:
    """Load configuration, letting environment variables override the defaults above."""
    backend = (os.getenv("PANEL_ORACLE_BACKEND") or ORACLE_BACKEND).lower()
    if backend not in ("ollama", "vertex"):
        raise ValueError(f"PANEL_ORACLE_BACKEND must be 'ollama' or 'vertex', got {backend!r}")

    project = os.getenv("GOOGLE_CLOUD_PROJECT") or GOOGLE_CLOUD_PROJECT
    if backend == "vertex" and not project:
        raise ValueError("Please set GOOGLE_CLOUD_PROJECT in config.py or as environment variable")

    return Config(
        oracle_backend=backend,
        ollama_url=os.getenv("OLLAMA_URL") or OLLAMA_URL,
        ollama_model=os.getenv("OLLAMA_MODEL") or OLLAMA_MODEL,
        google_cloud_project=project,
        google_application_credentials=os.getenv("GOOGLE_APPLICATION_CREDENTIALS") or GOOGLE_APPLICATION_CREDENTIALS,
        api_url=os.getenv("PANEL_API_URL") or API_URL,
        user_id=os.getenv("PANEL_USER_ID") or USER_ID,
        log_file=os.getenv("PANEL_LOG_FILE") or LOG_FILE,
        log_level=(os.getenv("PANEL_LOG_LEVEL") or LOG_LEVEL).upper(),
    )
