"""
Request and audit logging.

Every line logged while a request is handled carries the request id and,
once the caller is authenticated, their user id. Ledger code adds
``document_types`` and ``consent_source`` as extras; the JSON formatter
lifts them to top-level keys so consent events can be searched per user
and per document.
"""

import json
import logging
import time
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp

from app.utils.request_meta import get_client_ip

request_id_var: ContextVar[str] = ContextVar("request_id", default="")
user_id_var: ContextVar[str] = ContextVar("user_id", default="")

AUDIT_FIELDS = (
    "user_id",
    "document_types",
    "consent_source",
    "error_code",
    "method",
    "path",
    "status_code",
    "duration_ms",
    "client_ip",
)

# Probes hit these constantly
QUIET_PATHS = frozenset({"/health"})


class RequestContextFilter(logging.Filter):
    """Stamp records with the current request id and caller."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get()
        if not getattr(record, "user_id", None):
            record.user_id = user_id_var.get() or None
        return True


class JsonLogFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", ""),
        }
        for field in AUDIT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                entry[field] = value

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


class AccessLogMiddleware(BaseHTTPMiddleware):
    """One line per request; the request id is echoed back as ``X-Request-ID``."""

    def __init__(self, app: ASGIApp, logger_name: str = "consent_ledger.access"):
        super().__init__(app)
        self.logger = logging.getLogger(logger_name)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request_id_var.set(request_id)
        started = time.perf_counter()

        response = await call_next(request)

        response.headers["X-Request-ID"] = request_id
        if request.url.path not in QUIET_PATHS:
            self._log_access(request, response.status_code, (time.perf_counter() - started) * 1000)
        return response

    def _log_access(self, request: Request, status_code: int, duration_ms: float) -> None:
        if status_code >= 500:
            level = logging.ERROR
        elif status_code >= 400:
            level = logging.WARNING
        else:
            level = logging.INFO

        identity = getattr(request.state, "user", None)
        self.logger.log(
            level,
            "%s %s -> %d",
            request.method,
            request.url.path,
            status_code,
            extra={
                "method": request.method,
                "path": request.url.path,
                "status_code": status_code,
                "duration_ms": round(duration_ms, 2),
                "client_ip": get_client_ip(request),
                "user_id": identity.user_id if identity else None,
            },
        )


def configure_logging(level: str = "INFO", json_output: bool = True) -> None:
    """Route all loggers through one stderr handler with request context."""
    handler = logging.StreamHandler()
    handler.addFilter(RequestContextFilter())
    if json_output:
        handler.setFormatter(JsonLogFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s [%(request_id)s] %(message)s"))

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level.upper())

    for noisy in ("uvicorn.access", "sqlalchemy.engine"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
