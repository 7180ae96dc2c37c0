"""JSON envelope helpers shared by every route.

All endpoints answer with the same shape:

- success: `{"status": <code>, "message": <text>, "data": <payload>}`
- error:   `{"status": <code>, "message": <text>}`
"""

from typing import Any


def success_response(status: int, data: Any, message: str) -> dict:
    """Build the success envelope."""
    return {"status": status, "message": message, "data": data}


def error_response(status: int, message: str) -> dict:
    """Build the envelope for an expected (4xx) failure."""
    return {"status": status, "message": message}


def failure_response(message: str) -> dict:
    """Build the envelope for an unexpected server-side failure."""
    return {"status": 500, "message": message}
