"""
Inbound webhook authenticity checks.

Both checks pass when no secret is configured.
"""

import hashlib
import hmac
from typing import Optional

SIGNATURE_PREFIX = "sha256="


def verify_github_signature(body: bytes, signature: Optional[str], secret: Optional[str]) -> bool:
    """Verify GitHub webhook signature (X-Hub-Signature-256) from raw body bytes."""
    if not secret:
        return True
    if not signature or not signature.startswith(SIGNATURE_PREFIX):
        return False
    expected_signature = SIGNATURE_PREFIX + hmac.new(
        secret.encode(),
        body,
        hashlib.sha256
    ).hexdigest()
    return hmac.compare_digest(signature, expected_signature)


def verify_gitlab_token(token: Optional[str], secret: Optional[str]) -> bool:
    """Verify the shared GitLab webhook token (X-Gitlab-Token)."""
    if not secret:
        return True
    if not token:
        return False
    return hmac.compare_digest(token.encode(), secret.encode())
