"""Inbound email webhook (thin HTTP layer).

Delegates the relay to `RelayPipelineService`:
verify DKIM -> render -> split -> deliver -> (stylize -> deliver).
The router is mounted under `/{WEBHOOK_PATH}` by main.py.
"""
from __future__ import annotations

import json
import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import ValidationError

from ..config import Settings, get_settings
from ..deps import get_relay_service, verify_webhook_signature
from ..exceptions import DeliveryError, DKIMVerificationError
from ..models import InboundEmail, RelayResponse
from ..services.orchestration.relay_pipeline import RelayPipelineService
from ..utils.dump import save_request

router = APIRouter(tags=["webhook"])
logger = logging.getLogger(__name__)


@router.post("", response_model=RelayResponse)
async def receive_email(
    request: Request,
    raw_body: bytes = Depends(verify_webhook_signature),
    settings: Settings = Depends(get_settings),
    relay: RelayPipelineService = Depends(get_relay_service),
) -> RelayResponse:
    """Relay one inbound email. Signature is already verified on the raw body."""
    try:
        payload = json.loads(raw_body)
    except ValueError as exc:
        logger.error("Error parsing request body: %s", exc)
        raise HTTPException(status_code=400, detail="Invalid request body")

    if settings.SAVE_REQUEST_BODY:
        save_request(payload, request.headers, settings.REQUEST_DUMP_DIR)

    try:
        email = InboundEmail.model_validate(payload)
    except ValidationError as exc:
        logger.error("Invalid email payload: %s", exc)
        raise HTTPException(status_code=400, detail="Invalid email payload")

    try:
        return await relay.process_email(email)
    except DKIMVerificationError as exc:
        raise HTTPException(status_code=403, detail=f"DKIM verification failed: {exc}")
    except DeliveryError as exc:
        logger.error("Delivery failed after %d block(s): %s", exc.sent, exc)
        raise HTTPException(status_code=502, detail="Error delivering email")
    except Exception:  # noqa: BLE001
        logger.exception("Error processing email")
        raise HTTPException(status_code=500, detail="Error processing email")
