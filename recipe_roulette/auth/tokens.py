from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt

from ..config import DEFAULT_APP_CONFIG, AppConfig
from ..errors import AuthError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    user_id: int
    username: str


def issue_token(user_id: int, username: str, config: AppConfig = DEFAULT_APP_CONFIG) -> str:
    """Return a signed JWT carrying ``userId`` and ``username``."""
    now = datetime.now(timezone.utc)
    payload = {
        "userId": user_id,
        "username": username,
        "iat": now,
        "exp": now + timedelta(minutes=config.jwt_expires_minutes),
    }
    return jwt.encode(payload, config.jwt_secret, algorithm=config.jwt_algorithm)


def decode_token(token: str, config: AppConfig = DEFAULT_APP_CONFIG) -> Identity:
    """
    Verify *token* and return the identity it carries.

    Expired tokens, bad signatures and payloads without a user id all
    raise ``AuthError``; callers only need to know whether it worked.
    """
    try:
        payload = jwt.decode(token, config.jwt_secret, algorithms=[config.jwt_algorithm])
    except jwt.ExpiredSignatureError:
        raise AuthError("Token has expired.") from None
    except jwt.InvalidTokenError:
        logger.debug("Rejected invalid bearer token", exc_info=True)
        raise AuthError("Token is invalid.") from None

    user_id = payload.get("userId")
    username = payload.get("username")
    if not isinstance(user_id, int) or not isinstance(username, str):
        raise AuthError("Token is invalid.")
    return Identity(user_id=user_id, username=username)
