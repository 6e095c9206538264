"""Admin session tokens."""

import hmac
from typing import Any, Dict, Optional

import jwt
import pendulum

COOKIE_NAME = "admin_token"
ALGORITHM = "HS256"


def check_password(candidate: Optional[str], expected: Optional[str]) -> bool:
    """Compare a submitted password with the configured one."""
    if not candidate or not expected:
        return False
    return hmac.compare_digest(candidate.encode("utf-8"), expected.encode("utf-8"))


def create_token(secret: str, hours: int = 24, now: Optional[pendulum.DateTime] = None) -> str:
    """
    Sign an admin session token.

    Args:
        secret: HS256 signing secret
        hours: Token lifetime
        now: Issue time (defaults to the current UTC time)

    Returns:
        Encoded JWT
    """
    issued = now or pendulum.now("UTC")
    payload = {
        "role": "admin",
        "iat": int(issued.timestamp()),
        "exp": int(issued.add(hours=hours).timestamp()),
    }
    return jwt.encode(payload, secret, algorithm=ALGORITHM)


def verify_token(token: Optional[str], secret: Optional[str]) -> Optional[Dict[str, Any]]:
    """Decode a session token; None if it is missing, expired or forged."""
    if not token or not secret:
        return None
    try:
        return jwt.decode(token, secret, algorithms=[ALGORITHM])
    except jwt.InvalidTokenError:
        return None
