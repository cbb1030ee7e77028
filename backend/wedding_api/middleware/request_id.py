"""
Wedding Gallery Backend — Request ID Middleware
=================================================

What:  Assigns a short correlation ID to each request and echoes it back.
How:   Reuses the client's X-Request-ID header when present, otherwise
       generates one; stores it in a ContextVar read by the access log and
       the error handlers.
Who:   Applied to every request via Starlette middleware.

Error bodies carry the same ID, so a guest's screenshot of a failed upload
can be matched to the server-side log line holding the Cloudinary error.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on one event loop each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Behavior:
        1. Use the client's X-Request-ID header if sent
        2. Otherwise generate an 8-character ID
        3. Store it in the ContextVar
        4. Add it to the response headers
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get("X-Request-ID", str(uuid.uuid4())[:8])

        request_id_var.set(rid)

        response = await call_next(request)
        response.headers["X-Request-ID"] = rid

        return response
