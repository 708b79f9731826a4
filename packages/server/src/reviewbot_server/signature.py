import hashlib
import hmac
from typing import Optional

SIGNATURE_PREFIX = "sha256="


def sign_payload(payload: bytes, secret: str) -> str:
    """Return the X-Hub-Signature-256 header value GitHub sends for ``payload``."""
    return SIGNATURE_PREFIX + hmac.new(secret.encode(), payload, hashlib.sha256).hexdigest()


def verify_signature(payload: bytes, signature: Optional[str], secret: Optional[str]) -> bool:
    """Verify a GitHub webhook signature in constant time."""
    if not signature or not secret:
        return False
    return hmac.compare_digest(sign_payload(payload, secret), signature)
