"""FastAPI dependencies (webhook signature check, service wiring)."""
from __future__ import annotations

import logging
from fastapi import Depends, Header, HTTPException, Request
from .config import Settings, get_settings
from .services.orchestration.relay_pipeline import RelayPipelineService
from .exceptions import SignatureVerificationError
from .services.verification import ensure_valid_signature

logger = logging.getLogger(__name__)


async def verify_webhook_signature(
    request: Request,
    x_webhook_signature: str | None = Header(default=None, alias="X-Webhook-Signature"),
    settings: Settings = Depends(get_settings),
) -> bytes:
    """Verify the HMAC-SHA256 signature of the raw body and return the body.

    The signature must be computed over the exact bytes received, so this
    runs before any JSON parsing. An empty WEBHOOK_SIGNATURE_KEY disables
    the check (local development).
    """
    body = await request.body()
    try:
        ensure_valid_signature(settings.WEBHOOK_SIGNATURE_KEY, body, x_webhook_signature)
    except SignatureVerificationError as exc:
        logger.error("Rejected webhook: %s", exc)
        raise HTTPException(status_code=403, detail=str(exc))
    return body


def get_relay_service(settings: Settings = Depends(get_settings)) -> RelayPipelineService:
    return RelayPipelineService(settings)
