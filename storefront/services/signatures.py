"""Shared-secret HMAC signatures for incoming webhooks"""

import hashlib
import hmac
import time
from typing import Optional


class WebhookSignatureError(Exception):
    """Webhook payload could not be authenticated"""
    pass


def compute_signature(secret: str, payload: str, timestamp: int) -> str:
    signed = f"{timestamp}.{payload}".encode()
    return hmac.new(secret.encode(), signed, hashlib.sha256).hexdigest()


def sign_payload(secret: str, payload: str, timestamp: Optional[int] = None) -> str:
    """Build a ``t=<unix ts>,v1=<hex digest>`` signature header"""
    timestamp = int(time.time()) if timestamp is None else timestamp
    return f"t={timestamp},v1={compute_signature(secret, payload, timestamp)}"


def verify_signature(
    secret: str,
    payload: str,
    header: str,
    tolerance: int = 300,
    now: Optional[int] = None,
) -> None:
    """
    Check a signature header against the raw payload.

    Raises:
        WebhookSignatureError: malformed header, stale timestamp or digest mismatch
    """
    parts = {}
    for element in header.split(","):
        key, _, value = element.strip().partition("=")
        if key and value:
            parts.setdefault(key, []).append(value)

    try:
        timestamp = int(parts["t"][0])
    except (KeyError, ValueError):
        raise WebhookSignatureError("Missing or invalid timestamp")

    candidates = parts.get("v1", [])
    if not candidates:
        raise WebhookSignatureError("No v1 signature in header")

    now = int(time.time()) if now is None else now
    if tolerance and abs(now - timestamp) > tolerance:
        raise WebhookSignatureError("Timestamp outside the tolerance window")

    expected = compute_signature(secret, payload, timestamp)
    if not any(hmac.compare_digest(expected, candidate) for candidate in candidates):
        raise WebhookSignatureError("Signature mismatch")
