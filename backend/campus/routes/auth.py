"""Account registration and login endpoints."""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlmodel import Session

from .. import services
from ..config import settings
from ..database import get_session
from ..errors import TooManyRequests, Unauthorized
from ..responses import success_response
from ..schemas import LoginIn, RegisterIn, TokenOut, UserOut, to_payload
from ..utils.rate_limit import InMemoryRateLimiter

router = APIRouter(prefix="/api/auth", tags=["auth"])
_login_rate_limiter = InMemoryRateLimiter()


def _enforce_login_rate_limit(request: Request) -> None:
    key = request.client.host if request.client else "unknown"
    allowed, retry_after = _login_rate_limiter.allow(
        key, settings.LOGIN_RATE_LIMIT_PER_MIN, settings.LOGIN_RATE_LIMIT_WINDOW_SECONDS
    )
    if not allowed:
        raise TooManyRequests(
            f"Too many login attempts; retry after {retry_after}s",
            headers={"Retry-After": str(retry_after)},
        )


@router.post("/register")
def register(payload: RegisterIn, db: Session = Depends(get_session)):
    """Create an account. The password is stored hashed."""
    user = services.AuthService(db).register(payload)
    return JSONResponse(
        status_code=201,
        content=success_response(201, to_payload(UserOut, user), "User registered successfully"),
    )


@router.post("/login")
def login(payload: LoginIn, request: Request, db: Session = Depends(get_session)):
    """Authenticate and return a signed session token.

    The token's `id` claim is the caller's profile id; every protected
    endpoint identifies the caller by it.
    """
    _enforce_login_rate_limit(request)
    token = services.AuthService(db).authenticate(payload.email, payload.password)
    if not token:
        raise Unauthorized("Invalid credentials")
    return JSONResponse(
        status_code=200,
        content=success_response(200, to_payload(TokenOut, {"access_token": token}), "Logged in successfully"),
    )
