from __future__ import annotations

import html as html_lib
import logging
import uuid
from typing import Optional

from ...config import Settings, get_settings
from ...exceptions import DKIMVerificationError
from ...models import InboundEmail, RelayResponse
from ..discord import DiscordWebhookClient
from ..renderer import EmailRenderer, RenderConfig
from ..rewriter import StyleRewriter, append_disclaimer
from ..verification import verify_dkim

logger = logging.getLogger(__name__)


def body_html(email: InboundEmail) -> str:
    """HTML body, or the plain-text body escaped into HTML when no HTML was sent."""
    if email.html and email.html.strip():
        return email.html
    if email.text:
        return html_lib.escape(email.text).replace("\n", "<br>")
    return ""


class RelayPipelineService:
    """Owns the relay of a single email: verify -> render -> deliver -> stylize."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        renderer: Optional[EmailRenderer] = None,
        rewriter: Optional[StyleRewriter] = None,
        original_client: Optional[DiscordWebhookClient] = None,
        stylized_client: Optional[DiscordWebhookClient] = None,
    ) -> None:
        self.settings = settings or get_settings()
        s = self.settings
        self.renderer = renderer or EmailRenderer(RenderConfig.from_settings(s))
        self.rewriter = rewriter or StyleRewriter(s)
        self.original = original_client or DiscordWebhookClient(
            s.DISCORD_WEBHOOK_URL,
            dry_run=s.DRY_RUN,
            timeout=s.DELIVERY_TIMEOUT_SECONDS,
            label="original",
        )
        self.stylized = stylized_client or DiscordWebhookClient(
            s.DISCORD_WEBHOOK_URL_STYLIZED,
            dry_run=s.DRY_RUN,
            timeout=s.DELIVERY_TIMEOUT_SECONDS,
            label="stylized",
        )

    def _stylized_enabled(self) -> bool:
        return self.settings.ENABLE_STYLIZED and bool(self.stylized.url or self.stylized.dry_run)

    async def process_email(self, email: InboundEmail) -> RelayResponse:
        relay_id = uuid.uuid4().hex[:12]

        if self.settings.VERIFY_DKIM:
            verification = verify_dkim(email.dkim, self.settings.ALLOWED_FROM_EMAILS)
            if not verification.valid:
                logger.error("[%s] DKIM verification failed: %s", relay_id, verification.reason)
                raise DKIMVerificationError(verification.reason)
            logger.debug("[%s] DKIM verification successful", relay_id)

        text = self.renderer.render_message(body_html(email), email.subject)
        blocks = self.renderer.split(text)
        logger.info("[%s] rendered %d chars into %d blocks", relay_id, len(text), len(blocks))

        sent = await self.original.send_blocks(blocks)

        stylized_sent = 0
        if self._stylized_enabled():
            rewritten = await self.rewriter.rewrite_async(text)
            stylized_blocks = self.renderer.split(append_disclaimer(rewritten))
            stylized_sent = await self.stylized.send_blocks(stylized_blocks)
            logger.info("[%s] sent %d stylized blocks", relay_id, stylized_sent)

        return RelayResponse(
            relayId=relay_id,
            blocksSent=sent,
            stylizedBlocksSent=stylized_sent,
        )
