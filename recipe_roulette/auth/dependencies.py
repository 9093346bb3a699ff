from __future__ import annotations

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..errors import AuthError
from .tokens import Identity, decode_token

_bearer = HTTPBearer(auto_error=False)


def require_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
) -> Identity:
    """Raise 401 unless the request carries a valid bearer token."""
    if credentials is None or not credentials.credentials.strip():
        raise AuthError("Authorization header missing or malformed.")
    return decode_token(credentials.credentials.strip(), request.app.state.config)
