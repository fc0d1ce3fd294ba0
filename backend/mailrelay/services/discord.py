"""Discord webhook delivery: one message per block, strictly in order."""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Sequence

import httpx
from tenacity import (
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_random_exponential,
)

from ..exceptions import DeliveryError

logger = logging.getLogger(__name__)


def _is_retryable(exc: BaseException) -> bool:  # pragma: no cover - simple predicate
    if isinstance(exc, (httpx.RequestError, httpx.TimeoutException)):
        return True
    if isinstance(exc, httpx.HTTPStatusError):
        status = exc.response.status_code
        return status == 429 or 500 <= status < 600
    return False


class DiscordWebhookClient:
    """Posts text blocks to a Discord webhook URL.

    Blocks already sent stay sent when a later one fails; the failure is
    raised as DeliveryError carrying how many blocks went out.
    """

    def __init__(
        self,
        url: str,
        *,
        dry_run: bool = False,
        timeout: float = 15.0,
        label: str = "original",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.url = url
        self.dry_run = dry_run
        self.timeout = timeout
        self.label = label
        self._transport = transport

    @retry(
        reraise=True,
        stop=stop_after_attempt(3),
        wait=wait_random_exponential(multiplier=0.2, max=5),
        retry=retry_if_exception(_is_retryable),
    )
    async def _post_json(self, client: httpx.AsyncClient, payload: Dict[str, Any]) -> None:
        resp = await client.post(self.url, json=payload)
        resp.raise_for_status()

    async def send_blocks(self, blocks: Sequence[str]) -> int:
        """Send non-blank blocks in order. Returns the number of blocks sent."""
        pending = [b for b in blocks if b.strip()]
        if self.dry_run:
            for idx, block in enumerate(pending, start=1):
                logger.info("[dry-run][%s] block %d/%d:\n%s", self.label, idx, len(pending), block)
            return len(pending)
        if not pending:
            return 0
        if not self.url:
            raise DeliveryError(f"No webhook URL configured for {self.label} delivery")

        sent = 0
        t = httpx.Timeout(self.timeout, connect=5.0)
        async with httpx.AsyncClient(timeout=t, transport=self._transport) as client:
            for idx, block in enumerate(pending, start=1):
                try:
                    await self._post_json(client, {"content": block})
                except httpx.HTTPError as exc:
                    logger.error("[%s] block %d/%d failed: %s", self.label, idx, len(pending), exc)
                    raise DeliveryError(
                        f"Failed to deliver {self.label} block {idx}/{len(pending)}: {exc}", sent=sent
                    ) from exc
                sent += 1
                logger.debug("[%s] sent block %d/%d (%d chars)", self.label, idx, len(pending), len(block))
        return sent
