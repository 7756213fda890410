"""
security/auth.py
-----------------
Bearer-token check for the manual broadcast endpoint.
"""

import hmac
from typing import Optional

from config import DEBUG_TOKEN
from utils.logger import get_logger

logger = get_logger(__name__)


def is_debug_authorized(authorization: Optional[str], token: str = DEBUG_TOKEN) -> bool:
    """
    Check an `Authorization` header against the configured debug token.

    Behavior:
        - An empty token disables the endpoint: every request is refused.
        - The header must be exactly ``Bearer <token>``.
        - Refused attempts are logged.
    """
    if not token:
        logger.warning("Debug endpoint called but DEBUG_TOKEN is not configured")
        return False
    expected = f"Bearer {token}"
    if authorization is None or not hmac.compare_digest(authorization.encode(), expected.encode()):
        logger.warning("Unauthorized access attempt on debug endpoint")
        return False
    return True
