"""Stylized rewrite service: OpenAI-compatible chat completion, fail-open.

Async implementation using httpx so the FastAPI event loop is not blocked
while waiting on the upstream LLM API. Includes lightweight retries via
tenacity for transient network and 429/5xx responses. Any failure returns
the input text unchanged so the relay never loses the message.
"""
from __future__ import annotations

import logging
import random
from pathlib import Path
from typing import Any, Dict, Optional

import httpx
from tenacity import (
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_random_exponential,
)

from ..config import Settings, get_settings

logger = logging.getLogger(__name__)


# Retry predicate: network errors, timeouts, and 429/5xx HTTP errors
def _is_retryable(exc: BaseException) -> bool:  # pragma: no cover - simple predicate
    if isinstance(exc, (httpx.RequestError, httpx.TimeoutException)):
        return True
    if isinstance(exc, httpx.HTTPStatusError):
        status = exc.response.status_code
        return status == 429 or 500 <= status < 600
    return False


PLACEHOLDER = "{{ email_body }}"

SYSTEM_PROMPT = (
    "You are a Gen Z youth translator that converts formal email content into "
    "Gen Z slang style, lingo, and memes."
)

DEFAULT_PROMPT = (
    """Rewrite the email below in casual Gen Z style.

Rules:
- Keep every fact: dates, times, places, names, amounts and links.
- Keep lists as lists and keep code blocks (```) exactly as they are.
- Use Discord markdown only (**bold**, *italic*, - bullets).
- Output only the rewritten email, no preamble.

Email:
{{ email_body }}
"""
)

DISCLAIMERS = (
    "lowkey, the bot ain't always 100% accurate. peep the receipts (dates, times, places) in the original just in case.",
    "ngl, the bot can slip up sometimes. fact check deets like dates, times, and locations in the original.",
    "the bot's got the vibes, but always double-check the deets in the original just to be sure.",
    "tbh, the bot is 95% valid but still slips here n there. cross-check the info (dates, times, places) in the original.",
)


def append_disclaimer(text: str, rng: Optional[random.Random] = None) -> str:
    """Append a separator and a randomly picked accuracy disclaimer."""
    choice = (rng or random).choice(DISCLAIMERS)
    return f"{text}\n\n---\n{choice}"


class StyleRewriter:
    def __init__(self, settings: Optional[Settings] = None, *, transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
        self.settings = settings or get_settings()
        self._transport = transport
        self.prompt = self._load_prompt(self.settings.REWRITE_PROMPT_PATH)

    @staticmethod
    def _load_prompt(path: str) -> str:
        if not path:
            return DEFAULT_PROMPT
        try:
            return Path(path).read_text(encoding="utf-8")
        except OSError as exc:
            logger.warning("Could not read rewrite prompt %s (%s); using default", path, exc)
            return DEFAULT_PROMPT

    def _completions_url(self) -> str:
        return f"{self.settings.OPENAI_BASE_URL}/chat/completions"

    def build_prompt(self, text: str) -> str:
        if PLACEHOLDER in self.prompt:
            return self.prompt.replace(PLACEHOLDER, text)
        return f"{self.prompt}\n\n{text}"

    @retry(
        reraise=True,
        stop=stop_after_attempt(3),
        wait=wait_random_exponential(multiplier=0.2, max=5),
        retry=retry_if_exception(_is_retryable),
    )
    async def _post_json(self, url: str, *, headers: Optional[Dict[str, str]] = None, payload: Dict[str, Any], timeout: float = 60.0) -> Dict[str, Any]:
        """HTTP POST JSON with retries. Raises httpx.HTTPStatusError on non-2xx.

        Returns parsed JSON dict.
        """
        t = httpx.Timeout(timeout, connect=5.0)
        async with httpx.AsyncClient(timeout=t, transport=self._transport) as client:
            resp = await client.post(url, headers=headers, json=payload)
            resp.raise_for_status()
            return resp.json()

    async def rewrite_async(self, text: str) -> str:
        """Return the stylized version of `text`, or `text` itself on any failure."""
        if not self.settings.OPENAI_API_KEY:
            logger.warning("Missing OPENAI_API_KEY; skipping stylized rewrite")
            return text
        headers = {
            "Authorization": f"Bearer {self.settings.OPENAI_API_KEY}",
            "Content-Type": "application/json",
        }
        payload = {
            "model": self.settings.OPENAI_MODEL,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": self.build_prompt(text)},
            ],
            "temperature": self.settings.REWRITE_TEMPERATURE,
            "max_tokens": self.settings.REWRITE_MAX_TOKENS,
        }
        logger.debug("Rewriting %d chars with %s", len(text), self.settings.OPENAI_MODEL)
        try:
            data = await self._post_json(self._completions_url(), headers=headers, payload=payload)
            content = data["choices"][0]["message"]["content"]
        except Exception as exc:  # noqa: BLE001
            logger.error("Stylized rewrite failed, relaying original text: %s", exc)
            return text
        if not isinstance(content, str) or not content.strip():
            logger.warning("Stylized rewrite returned no content; relaying original text")
            return text
        logger.debug("Stylized rewrite completed (%d chars)", len(content))
        return content.strip()
