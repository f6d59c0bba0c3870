"""
Configuration settings for the transcript knowledge hub.
"""

import os
from typing import List
from pathlib import Path
from dotenv import load_dotenv


# Ensure environment variables are loaded
load_dotenv()


def _split_list(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class Config:
    """Base configuration class."""

    # Application info
    APP_NAME = "AI Knowledge Hub"
    APP_VERSION = "0.2.0"

    # Storage
    BASE_DIR = Path(__file__).resolve().parent.parent.absolute()
    TRANSCRIPTS_DIR = Path(os.getenv("TRANSCRIPTS_DIR", BASE_DIR / "transcripts"))
    INDEX_FILENAME = "INDEX.md"

    # Secrets for the scheduled trigger and for everything else
    CRON_SECRET = os.getenv("CRON_SECRET")
    API_KEY = os.getenv("API_KEY")

    # Ingestion
    DEFAULT_SINCE_DAYS = int(os.getenv("DEFAULT_SINCE_DAYS", "2"))
    SEED_SINCE_DAYS = int(os.getenv("SEED_SINCE_DAYS", "90"))
    REQUEST_DELAY_SECONDS = float(os.getenv("REQUEST_DELAY_SECONDS", "0.5"))
    SEED_REQUEST_DELAY_SECONDS = float(os.getenv("SEED_REQUEST_DELAY_SECONDS", "1.0"))
    INGEST_TIMEOUT_SECONDS = float(os.getenv("INGEST_TIMEOUT_SECONDS", "300"))
    HTTP_TIMEOUT_SECONDS = float(os.getenv("HTTP_TIMEOUT_SECONDS", "30"))
    TRANSCRIPT_LANGUAGES = _split_list(os.getenv("TRANSCRIPT_LANGUAGES", "en,en-US,en-GB"))
    TRANSCRIPT_PROXY_URL = os.getenv("TRANSCRIPT_PROXY_URL")

    # Rate limiting for the API endpoints
    RATE_LIMIT_REQUESTS = int(os.getenv("RATE_LIMIT_REQUESTS", "10"))
    RATE_LIMIT_WINDOW_SECONDS = float(os.getenv("RATE_LIMIT_WINDOW_SECONDS", "60"))

    # Summarization
    GROQ_API_KEY = os.getenv("GROQ_API_KEY")
    SUMMARY_MODEL_PROVIDER = os.getenv("SUMMARY_MODEL_PROVIDER", "groq")
    DEFAULT_SUMMARY_MODEL = os.getenv("DEFAULT_SUMMARY_MODEL", "llama-3.3-70b-versatile")
    SUMMARY_MAX_TOKENS = int(os.getenv("SUMMARY_MAX_TOKENS", "2048"))
    SUMMARY_CHUNK_SIZE = int(os.getenv("SUMMARY_CHUNK_SIZE", "12000"))
    SUMMARY_CHUNK_OVERLAP = int(os.getenv("SUMMARY_CHUNK_OVERLAP", "400"))

    @classmethod
    def initialize(cls):
        """Initialize the application configuration."""
        cls.TRANSCRIPTS_DIR.mkdir(parents=True, exist_ok=True)

        # Secrets are checked again per request; endpoints fail closed without them
        if not cls.CRON_SECRET:
            print("WARNING: CRON_SECRET environment variable not set.")
        if not cls.API_KEY:
            print("WARNING: API_KEY environment variable not set.")


class DevelopmentConfig(Config):
    """Development configuration."""

    DEBUG = True
    LOG_LEVEL = "DEBUG"


class ProductionConfig(Config):
    """Production configuration."""

    DEBUG = False
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
