"""Sender verification: webhook HMAC signatures and DKIM results."""
from __future__ import annotations

import hashlib
import hmac
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from ..exceptions import SignatureVerificationError
from ..models import DkimData, DkimResult

logger = logging.getLogger(__name__)


@dataclass
class DkimVerification:
    valid: bool
    reason: str = ""
    signatures: List[DkimResult] = field(default_factory=list)


def compute_signature(key: str, body: bytes) -> str:
    """Hex HMAC-SHA256 of the raw request body."""
    return hmac.new(key.encode("utf-8"), body, hashlib.sha256).hexdigest()


def is_valid_signature(key: str, body: bytes, signature: Optional[str]) -> bool:
    """Check the signature header. An empty key disables the check."""
    if not key:
        return True
    if not signature:
        return False
    expected = compute_signature(key, body)
    logger.debug("Computed signature: %s", expected)
    return hmac.compare_digest(expected, signature.strip().lower())


def ensure_valid_signature(key: str, body: bytes, signature: Optional[str]) -> None:
    if not is_valid_signature(key, body, signature):
        raise SignatureVerificationError("Invalid webhook signature")


def verify_dkim(dkim: Optional[DkimData], allowed_from: Sequence[str]) -> DkimVerification:
    """Accept only allowed envelope senders with at least one passing DKIM signature."""
    if dkim is None or not dkim.envelopeFrom or dkim.results is None:
        logger.debug("DKIM verification failed: missing DKIM data")
        return DkimVerification(False, "Missing DKIM data")

    envelope_from = dkim.envelopeFrom.strip().lower()
    allowed = {a.strip().lower() for a in allowed_from}
    logger.debug("Envelope from: %s, allowed: %s", envelope_from, sorted(allowed))
    if envelope_from not in allowed:
        return DkimVerification(False, f"Envelope from {dkim.envelopeFrom} not in allowed list")

    if not dkim.results:
        return DkimVerification(False, "No DKIM results found")

    passed = [r for r in dkim.results if r.passed]
    if not passed:
        return DkimVerification(False, "No valid DKIM signatures found")

    logger.debug("DKIM verification passed: %d valid signature(s)", len(passed))
    return DkimVerification(True, signatures=passed)
