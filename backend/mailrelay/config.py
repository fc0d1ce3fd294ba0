"""Application settings and configuration helpers."""
from __future__ import annotations

import os
from functools import lru_cache
from typing import List
from dotenv import load_dotenv, find_dotenv


class Settings:
    """Runtime configuration loaded from environment variables.

    Defaults are suitable for local development. Production should set
    explicit values (webhook URLs, signature key, allowed senders) via the
    environment or a `.env` file.
    """

    APP_NAME: str = "Email Relay API"

    # Inbound webhook
    WEBHOOK_PATH: str
    WEBHOOK_SIGNATURE_KEY: str
    ALLOWED_FROM_EMAILS: List[str]
    VERIFY_DKIM: bool

    # Delivery
    DISCORD_WEBHOOK_URL: str
    DISCORD_WEBHOOK_URL_STYLIZED: str
    DELIVERY_TIMEOUT_SECONDS: float

    # Stylized rewrite
    ENABLE_STYLIZED: bool
    OPENAI_API_KEY: str
    OPENAI_MODEL: str
    OPENAI_BASE_URL: str
    REWRITE_MAX_TOKENS: int
    REWRITE_TEMPERATURE: float
    REWRITE_PROMPT_PATH: str

    # Rendering
    MSG_CHAR_LIMIT: int
    FOOTER_MARKER_CLASS: str
    TABLE_MAX_COL_WIDTH: int

    # Debugging
    DEBUG: bool
    DRY_RUN: bool
    SAVE_REQUEST_BODY: bool
    REQUEST_DUMP_DIR: str
    LOG_LEVEL: str

    def __init__(self) -> None:
        # Load .env once (supports parent directories)
        load_dotenv(find_dotenv(usecwd=True), override=False)
        self.WEBHOOK_PATH = os.getenv("WEBHOOK_PATH", "webhook").strip("/") or "webhook"
        self.WEBHOOK_SIGNATURE_KEY = os.getenv("WEBHOOK_SIGNATURE_KEY", "")
        self.ALLOWED_FROM_EMAILS = self._get_list("ALLOWED_FROM_EMAILS")
        self.VERIFY_DKIM = self._get_bool("VERIFY_DKIM", True)

        self.DISCORD_WEBHOOK_URL = os.getenv("DISCORD_WEBHOOK_URL", "")
        self.DISCORD_WEBHOOK_URL_STYLIZED = os.getenv("DISCORD_WEBHOOK_URL_STYLIZED", "")
        self.DELIVERY_TIMEOUT_SECONDS = float(os.getenv("DELIVERY_TIMEOUT_SECONDS", "15"))

        self.ENABLE_STYLIZED = self._get_bool("ENABLE_STYLIZED", False)
        self.OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
        self.OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4.1-mini")
        self.OPENAI_BASE_URL = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1").rstrip("/")
        self.REWRITE_MAX_TOKENS = int(os.getenv("REWRITE_MAX_TOKENS", "5000"))
        self.REWRITE_TEMPERATURE = float(os.getenv("REWRITE_TEMPERATURE", "0.5"))
        self.REWRITE_PROMPT_PATH = os.getenv("REWRITE_PROMPT_PATH", "")

        # Discord caps messages at 2000 chars; keep headroom
        self.MSG_CHAR_LIMIT = int(os.getenv("MSG_CHAR_LIMIT", "1800"))
        self.FOOTER_MARKER_CLASS = os.getenv("FOOTER_MARKER_CLASS", "gmail_signature_prefix")
        self.TABLE_MAX_COL_WIDTH = int(os.getenv("TABLE_MAX_COL_WIDTH", "25"))

        self.DEBUG = self._get_bool("DEBUG", False)
        # Debug mode implies dry run unless explicitly overridden
        self.DRY_RUN = self._get_bool("DRY_RUN", self.DEBUG)
        self.SAVE_REQUEST_BODY = self._get_bool("SAVE_REQUEST_BODY", False)
        self.REQUEST_DUMP_DIR = os.getenv("REQUEST_DUMP_DIR", ".")
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG" if self.DEBUG else "INFO").upper()

    @staticmethod
    def _get_list(name: str, default: str = "") -> List[str]:
        raw = os.getenv(name, default)
        return [item.strip() for item in raw.split(",") if item.strip()]

    @staticmethod
    def _get_bool(name: str, default: bool) -> bool:
        raw = os.getenv(name)
        if raw is None or not raw.strip():
            return default
        return raw.strip().lower() in ("1", "true", "yes", "on")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance."""
    return Settings()
