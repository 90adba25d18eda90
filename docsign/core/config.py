"""Application settings read from the environment (and an optional .env file)."""

from __future__ import annotations

import os

from dotenv import load_dotenv

load_dotenv()


class Settings:
    APP_NAME: str = "DocSign"

    # Base URL used when issuing recipient links
    PUBLIC_BASE_URL: str = os.getenv("DOCSIGN_BASE_URL", "http://localhost:3000")

    # API access
    API_KEY_PREFIX: str = os.getenv("DOCSIGN_API_KEY_PREFIX", "dsk_")

    # Fill renderer defaults for the API batch path
    FILL_MAX_FONT_SIZE: float = float(os.getenv("DOCSIGN_FILL_MAX_FONT_SIZE", "12"))
    FILL_MIN_FONT_SIZE: float = float(os.getenv("DOCSIGN_FILL_MIN_FONT_SIZE", "6"))

    # Editor
    SNAP_THRESHOLD: float = float(os.getenv("DOCSIGN_SNAP_THRESHOLD", "5"))

    # Webhooks
    WEBHOOK_TIMEOUT: float = float(os.getenv("DOCSIGN_WEBHOOK_TIMEOUT", "10"))
    WEBHOOK_USER_AGENT: str = os.getenv("DOCSIGN_WEBHOOK_USER_AGENT", "DocSign-Webhook/1.0")

    LOG_LEVEL: str = os.getenv("DOCSIGN_LOG_LEVEL", "INFO")


settings = Settings()
