"""
Configuration settings for the NoteTube study-notes application.
"""

import os
import tempfile
from typing import List
from pathlib import Path
from dotenv import load_dotenv

from notetube.utils.logger import logging


# Ensure environment variables are loaded
load_dotenv()


def _split_keys(raw: str) -> List[str]:
    """Split a comma separated key list, dropping blanks."""
    return [key.strip() for key in raw.split(",") if key.strip()]


class Config:
    """Base configuration class."""

    # Application info
    APP_NAME = "NoteTube AI"
    APP_VERSION = "0.2.0"

    # Data directories
    BASE_DIR = Path(__file__).resolve().parent.parent.absolute()
    DATA_DIR = Path(os.getenv("DATA_DIR", BASE_DIR / "data"))
    TEMP_AUDIO_DIR = Path(
        os.getenv("TEMP_AUDIO_DIR", Path(tempfile.gettempdir()) / "notetube-audio")
    )

    DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{DATA_DIR}/notetube.db")

    # API keys
    GROQ_API_KEY = os.getenv("GROQ_API_KEY")
    YOUTUBE_API_KEYS = _split_keys(os.getenv("YOUTUBE_API_KEYS", ""))
    YOUTUBE_API_BASE_URL = "https://www.googleapis.com/youtube/v3/"

    # Where the API is served, used by the Python client
    PUBLIC_URL = os.getenv("PUBLIC_URL", "http://localhost:8000")

    # Default models
    TRANSCRIPTION_MODEL = os.getenv("TRANSCRIPTION_MODEL", "whisper-large-v3")
    DEFAULT_NOTES_MODEL = os.getenv("DEFAULT_NOTES_MODEL", "llama-3.3-70b-versatile")
    RECOMMENDATION_MODEL = os.getenv("RECOMMENDATION_MODEL", "llama-3.1-8b-instant")
    MODEL_PROVIDER = "groq"
    NOTES_TEMPERATURE = float(os.getenv("NOTES_TEMPERATURE", "0.7"))

    # Context limits (characters) sent to the LLM
    MAX_TRANSCRIPT_CHARS = int(os.getenv("MAX_TRANSCRIPT_CHARS", "25000"))
    MAX_NOTES_CONTEXT_CHARS = int(os.getenv("MAX_NOTES_CONTEXT_CHARS", "15000"))
    MAX_SYNTHESIS_CHARS = int(os.getenv("MAX_SYNTHESIS_CHARS", "30000"))

    HTTP_TIMEOUT_SECONDS = float(os.getenv("HTTP_TIMEOUT_SECONDS", "30"))

    # Library limits
    HISTORY_LIMIT = 50
    RECOMMENDATION_COUNT = 10
    RECOMMENDATION_SEARCH_LIMIT = 5
    QUIZ_MISTAKE_LIMIT = 3

    @classmethod
    def initialize(cls):
        """Initialize the application configuration."""
        cls.DATA_DIR.mkdir(parents=True, exist_ok=True)
        cls.TEMP_AUDIO_DIR.mkdir(parents=True, exist_ok=True)

        # Validate required environment variables
        if not cls.GROQ_API_KEY:
            logging.warning("GROQ_API_KEY environment variable not set. "
                            "Please set it in the .env file or environment variables.")
        if not cls.YOUTUBE_API_KEYS:
            logging.warning("YOUTUBE_API_KEYS environment variable not set. "
                            "Video metadata lookups will fail.")


class DevelopmentConfig(Config):
    """Development configuration."""

    LOG_LEVEL = "DEBUG"


class ProductionConfig(Config):
    """Production configuration."""

    LOG_LEVEL = "INFO"


# Determine which configuration to use based on environment
def get_config():
    """Get the appropriate configuration based on environment."""
    env = os.getenv("ENVIRONMENT", "development").lower()
    if env == "production":
        return ProductionConfig
    else:
        return DevelopmentConfig


# Create a config instance
config = get_config()
config.initialize()
