from __future__ import annotations

"""Domain-specific exceptions for the transform, verification and delivery layers.

Routers should catch these and translate them to appropriate HTTP responses.
"""


class InvalidBudgetError(ValueError):
    """Render configuration violates a contract (e.g. block budget <= 0)."""


class SignatureVerificationError(Exception):
    """Webhook HMAC signature missing or wrong (maps to HTTP 403)."""


class DKIMVerificationError(Exception):
    """Envelope sender or DKIM results rejected (maps to HTTP 403)."""


class DeliveryError(Exception):
    """A block could not be posted to the destination webhook (maps to HTTP 502)."""

    def __init__(self, message: str, *, sent: int = 0) -> None:
        super().__init__(message)
        self.sent = sent
