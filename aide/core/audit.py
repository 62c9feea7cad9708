"""
Audit Middleware - Request/response logging for monitoring.

This middleware logs all API requests including:
- Request method and path
- Response status code
- Request duration
- Session ID (when the path or header carries one)

It also stamps a small set of security headers on every response.
"""
import re
import time
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from aide.core.logging_config import get_logger

logger = get_logger(__name__)

_SESSION_PATH_REGEX = re.compile(r"/chat/sessions/([^/]+)")

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
}


def _session_hint(request: Request) -> str:
    """Best-effort session id for the log line (first 8 chars)."""
    match = _SESSION_PATH_REGEX.search(request.url.path)
    if match:
        return match.group(1)[:8]
    return request.headers.get("X-Session-Id", "")[:8] or "-"


class AuditMiddleware(BaseHTTPMiddleware):
    """
    Logs every request with timing and adds response headers.

    Health checks are logged at DEBUG to keep them out of the INFO log.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.perf_counter()
        method = request.method
        path = request.url.path
        client_ip = request.client.host if request.client else "unknown"
        session_id = _session_hint(request)

        try:
            response = await call_next(request)
        except Exception as e:
            duration = time.perf_counter() - start_time
            logger.error(
                f"REQUEST FAILED: {method} {path} "
                f"client={client_ip} duration={duration:.3f}s error={e}"
            )
            raise

        duration = time.perf_counter() - start_time

        if path.startswith("/health"):
            logger.debug(f"HEALTH: {path} status={response.status_code} duration={duration:.3f}s")
        else:
            if response.status_code >= 500:
                log_fn = logger.error
            elif response.status_code >= 400:
                log_fn = logger.warning
            else:
                log_fn = logger.info
            log_fn(
                f"REQUEST: {method} {path} "
                f"status={response.status_code} duration={duration:.3f}s "
                f"client={client_ip} session={session_id}"
            )

        response.headers["X-Response-Time"] = f"{duration:.3f}s"
        for header, value in SECURITY_HEADERS.items():
            response.headers[header] = value

        return response
