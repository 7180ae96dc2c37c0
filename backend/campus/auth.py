"""Session token helpers and FastAPI security dependencies.

`get_server_token` reads the bearer token from a request and returns
its payload, or `None` when the request is not authenticated. The
`require_token` dependency turns a missing identity into a 401 envelope
so protected handlers can rely on `token["id"]`.
"""

import logging
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
import jwt

from .config import settings
from .errors import Unauthorized

logger = logging.getLogger("campus.auth")

# auto_error=False so a missing header reaches our own 401 envelope
bearer_scheme = HTTPBearer(auto_error=False)

# Routers whose every endpoint depends on `require_token`. FastAPI parses a
# request body before running dependencies, so body errors on these paths
# must be checked against the token first.
TOKEN_PROTECTED_PREFIXES = ("/api/staff/announcements", "/api/notifications")


def decode_token(token: str) -> Optional[dict]:
    """Decode and verify a JWT token.

    Returns the decoded payload, or `None` for an expired, tampered or
    otherwise unreadable token.
    """
    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        logger.info("rejected expired token")
    except jwt.InvalidTokenError as exc:
        logger.info("rejected invalid token: %s", exc)
    return None


def get_server_token(request: Request) -> Optional[dict]:
    """Return the payload of the request's bearer token, if any."""
    header = request.headers.get("Authorization", "")
    scheme, _, credentials = header.partition(" ")
    if scheme.lower() != "bearer" or not credentials.strip():
        return None
    return decode_token(credentials.strip())


def require_token(
    request: Request,
    _credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> dict:
    """FastAPI dependency returning the caller's token payload.

    Raises `Unauthorized` when there is no valid token or the token
    carries no `id`.
    """
    token = get_server_token(request)
    if not token or not token.get("id"):
        raise Unauthorized("Unauthorized")
    return token


def is_anonymous_on_protected_path(request: Request) -> bool:
    """True when `request` targets a token-protected router without a usable token."""
    if not request.url.path.startswith(TOKEN_PROTECTED_PREFIXES):
        return False
    token = get_server_token(request)
    return not token or not token.get("id")
