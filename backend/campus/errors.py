"""Domain errors and the global exception handlers that render them.

Services and dependencies raise `ApiError` subclasses for expected
failures; the handlers registered here turn them, framework errors and
anything unexpected into the uniform JSON envelope.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from .responses import error_response, failure_response

logger = logging.getLogger("campus.errors")


class ApiError(Exception):
    """An expected failure carrying the HTTP status to answer with."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, status_code: int | None = None, headers: dict | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.headers = headers


class BadRequest(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST


class Unauthorized(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED


class NotFound(ApiError):
    status_code = status.HTTP_404_NOT_FOUND


class TooManyRequests(ApiError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    from .auth import is_anonymous_on_protected_path

    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError):
        logger.info("api_error %s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content=error_response(exc.status_code, exc.message),
            headers=exc.headers,
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content=error_response(exc.status_code, str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        if is_anonymous_on_protected_path(request):
            # the token check outranks any problem with the body
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content=error_response(status.HTTP_401_UNAUTHORIZED, "Unauthorized"),
            )
        errors = exc.errors()
        malformed = next((e for e in errors if e.get("type") == "json_invalid"), None)
        if malformed is not None:
            # an unparseable body is an unexpected failure, not a field error
            message = str((malformed.get("ctx") or {}).get("error") or malformed.get("msg"))
            logger.warning("malformed JSON body on %s: %s", request.url.path, message)
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content=failure_response(message),
            )
        logger.warning("validation error on %s: %s", request.url.path, errors)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=error_response(status.HTTP_400_BAD_REQUEST, _describe(errors)),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error("unhandled exception on %s: %s", request.url.path, exc, exc_info=exc)
        # built outside the request-id middleware, so echo the id here
        req_id = getattr(request.state, "request_id", None) or request.headers.get("X-Request-ID")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=failure_response(str(exc)),
            headers={"X-Request-ID": req_id} if req_id else None,
        )


def _describe(errors) -> str:
    """Render the first validation problem as `field: message`."""
    if not errors:
        return "Invalid request"
    first = errors[0]
    loc = [str(part) for part in first.get("loc", ()) if part not in ("body", "path", "query")]
    field = ".".join(loc)
    msg = first.get("msg", "invalid value")
    return f"{field}: {msg}" if field else msg
