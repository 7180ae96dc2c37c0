"""FastAPI application entrypoint.

This module builds the campus administration API: it installs the
middleware, the global error handlers and the resource routers.
Controllers are intentionally thin: they accept requests, delegate to
services, and return JSON envelopes.

Endpoints implemented:
- POST /api/auth/register, POST /api/auth/login
- GET, POST /api/admin/department
- GET, PUT, DELETE /api/admin/department/{id}
- GET, POST, PATCH, DELETE /api/staff/announcements
- GET, PATCH, DELETE /api/student/profile/{id}
- GET /api/notifications, PATCH /api/notifications/{id}/read
- GET /health
"""

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, Response
from fastapi.middleware.cors import CORSMiddleware
import json
import logging
import time
import uuid
from .config import settings
from .database import create_db_and_tables
from .errors import register_error_handlers
from .routes import announcements, auth, departments, notifications, students

app = FastAPI(title="Campus Administration API")
logger = logging.getLogger("campus.api")
if not logging.getLogger().handlers:
    logging.basicConfig(level=settings.LOG_LEVEL)

# Wide-open CORS keeps a local frontend dev server working without extra config in dev.
if settings.ALLOW_DEV_CORS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

register_error_handlers(app)
app.include_router(auth.router)
app.include_router(departments.router)
app.include_router(announcements.router)
app.include_router(students.router)
app.include_router(notifications.router)

create_db_and_tables()


def _request_log(request: Request, req_id: str, elapsed_ms: float, status_code: int | None = None) -> str:
    entry = {
        "request_id": req_id,
        "path": request.url.path,
        "method": request.method,
        "duration_ms": elapsed_ms,
        "client": request.client.host if request.client else "unknown",
    }
    if status_code is not None:
        entry["status_code"] = status_code
    return json.dumps(entry, ensure_ascii=True)


@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    req_id = request.headers.get("X-Request-ID", uuid.uuid4().hex)
    request.state.request_id = req_id
    started = time.perf_counter()
    response: Response
    try:
        response = await call_next(request)
    except Exception:
        elapsed_ms = round((time.perf_counter() - started) * 1000.0, 2)
        if request.url.path.startswith("/api"):
            logger.error("request_failed %s", _request_log(request, req_id, elapsed_ms))
        raise
    response.headers["X-Request-ID"] = req_id
    elapsed_ms = round((time.perf_counter() - started) * 1000.0, 2)
    if request.url.path.startswith("/api"):
        logger.info("request_done %s", _request_log(request, req_id, elapsed_ms, response.status_code))
    return response


@app.get("/", response_class=HTMLResponse)
def home():
    """Minimal homepage for quick manual testing."""
    return """
    <!DOCTYPE html>
    <html>
    <head>
      <meta charset="UTF-8" />
      <title>Campus Administration API</title>
      <style>
        body { font-family: Arial, sans-serif; margin: 32px; }
        a { color: #0a6; }
        .card { max-width: 640px; padding: 16px; border: 1px solid #ddd; border-radius: 8px; }
      </style>
    </head>
    <body>
      <div class="card">
        <h1>Campus Administration API</h1>
        <p>Quick links for local testing:</p>
        <ul>
          <li><a href="/docs">Swagger UI</a></li>
          <li><a href="/health">Health check</a></li>
        </ul>
        <p>Use <code>/api/auth/register</code> + <code>/api/auth/login</code> to get a token, then try <code>/api/staff/announcements</code>.</p>
      </div>
    </body>
    </html>
    """


@app.get("/health")
def health():
    """Lightweight health check for uptime monitoring."""
    return {"status": "ok"}
