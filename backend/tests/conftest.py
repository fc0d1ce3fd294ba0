"""Shared fixtures."""

import pytest

from mailrelay.config import Settings

_BASE_ENV = {
    "WEBHOOK_PATH": "webhook",
    "WEBHOOK_SIGNATURE_KEY": "",
    "ALLOWED_FROM_EMAILS": "sender@example.com",
    "VERIFY_DKIM": "true",
    "DISCORD_WEBHOOK_URL": "https://discord.test/original",
    "DISCORD_WEBHOOK_URL_STYLIZED": "",
    "ENABLE_STYLIZED": "false",
    "OPENAI_API_KEY": "",
    "REWRITE_PROMPT_PATH": "",
    "MSG_CHAR_LIMIT": "1800",
    "DEBUG": "false",
    "DRY_RUN": "false",
    "SAVE_REQUEST_BODY": "false",
}


@pytest.fixture
def make_settings(monkeypatch):
    """Build a fresh Settings from a controlled environment."""

    def _make(**overrides) -> Settings:
        for key, value in {**_BASE_ENV, **overrides}.items():
            monkeypatch.setenv(key, str(value))
        return Settings()

    return _make


@pytest.fixture
def dkim_pass():
    return {
        "envelopeFrom": "sender@example.com",
        "results": [{"signingDomain": "example.com", "status": {"result": "pass"}}],
    }
