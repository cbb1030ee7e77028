"""
Wedding Gallery Backend — Access Log Middleware
=================================================

What:  One access-log line per request on the `wedding_api.access` logger.
How:   Wraps the downstream call; the line is written even when the call
       raises, in which case it is recorded as a 500.
When:  Runs inside RequestIDMiddleware, so the request ID is already set.

Logged:     method, path, status, elapsed ms, request ID, peer address,
            declared upload size and event for POST /upload
Not logged: blessing text, image bytes, query strings other than `event`
"""

import logging
import time
from typing import Any, Dict

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from wedding_api.middleware.request_id import request_id_var

access_logger = logging.getLogger("wedding_api.access")

# Probes and docs are noise in the access log
QUIET_PATHS = frozenset({"/health", "/docs", "/redoc", "/openapi.json"})


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


def _upload_fields(request: Request) -> Dict[str, Any]:
    if request.method != "POST" or request.url.path != "/upload":
        return {}
    return {
        "event": request.query_params.get("event") or "-",
        "content_length": request.headers.get("content-length", "-"),
    }


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Access log for every route except QUIET_PATHS."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in QUIET_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        status = 500
        try:
            response = await call_next(request)
            status = response.status_code
            return response
        finally:
            elapsed_ms = (time.perf_counter() - started) * 1000
            peer = request.client.host if request.client else "-"
            fields = {
                "request_id": request_id_var.get(""),
                "method": request.method,
                "path": request.url.path,
                "status": status,
                "elapsed_ms": round(elapsed_ms, 1),
                "peer": peer,
                **_upload_fields(request),
            }
            extras = " ".join(
                f"{key}={fields[key]}" for key in ("event", "content_length") if key in fields
            )
            access_logger.log(
                level_for_status(status),
                "[%s] %s %s -> %d in %.1fms from %s%s",
                fields["request_id"],
                fields["method"],
                fields["path"],
                status,
                elapsed_ms,
                peer,
                f" ({extras})" if extras else "",
                extra=fields,
            )
