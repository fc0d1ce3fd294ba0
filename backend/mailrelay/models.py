"""Pydantic models for the inbound webhook payload and API responses."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class DkimStatus(BaseModel):
    """Outcome of checking one DKIM signature."""

    model_config = ConfigDict(extra="allow")

    result: Optional[str] = None
    comment: Optional[str] = None


class DkimResult(BaseModel):
    """One DKIM signature found on the message."""

    model_config = ConfigDict(extra="allow")

    signingDomain: Optional[str] = None
    selector: Optional[str] = None
    status: Optional[DkimStatus] = None

    @property
    def passed(self) -> bool:
        return bool(self.status and self.status.result == "pass")


class DkimData(BaseModel):
    """DKIM section of the forwarding provider's payload."""

    model_config = ConfigDict(extra="allow")

    envelopeFrom: Optional[str] = None
    results: Optional[List[DkimResult]] = None


class InboundEmail(BaseModel):
    """Inbound email as delivered by the forwarding provider's webhook."""

    model_config = ConfigDict(extra="allow")

    html: Optional[str] = Field(default=None, description="HTML body")
    text: Optional[str] = Field(default=None, description="Plain-text body")
    subject: Optional[str] = None
    dkim: Optional[DkimData] = None


class RelayResponse(BaseModel):
    """Result of relaying one email."""

    ok: bool = True
    relayId: str
    blocksSent: int = Field(0, ge=0)
    stylizedBlocksSent: int = Field(0, ge=0)


class HealthStatus(BaseModel):
    status: str = "ok"
    time: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    dryRun: bool = False
