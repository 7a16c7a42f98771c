from typing import Optional

from jose import JWTError, jwt

from config import ApplicationConfig
from audit_trail.domain.events import Principal


def verify_jwt(token: str) -> Optional[dict]:
    """
    Verify and decode JWT token

    Args:
        token: JWT token string

    Returns:
        Decoded payload dict or None if invalid
    """
    try:
        payload = jwt.decode(
            token, ApplicationConfig.JWT_SECRET, algorithms=["HS256"]
        )
        return payload
    except JWTError:
        return None


def principal_from_token(token: Optional[str]) -> Optional[Principal]:
    """
    Build the request principal from a bearer token

    Returns:
        Principal with the numeric user_id claim, or None when the token is
        missing, invalid, expired or carries no usable user_id
    """
    if not token:
        return None
    payload = verify_jwt(token)
    if payload is None:
        return None
    try:
        return Principal(user_id=int(payload["user_id"]))
    except (KeyError, TypeError, ValueError):
        return None
