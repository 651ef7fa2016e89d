"""
Request Logging Middleware

Logs every API request with method, path, status and latency.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("requests")

# Paths to skip (health checks, static assets)
SKIP_PATHS = {"/health", "/health/ready", "/favicon.ico"}

CLUB_HEADER = "x-club-id"


class RequestLogMiddleware(BaseHTTPMiddleware):
    """
    Logs each request once it has been answered.

    5xx responses log at ERROR, 4xx at WARNING, everything else at INFO.
    The calling club is taken from the ``X-Club-Id`` header when present.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        path = request.url.path

        if path in SKIP_PATHS:
            return await call_next(request)

        start = time.monotonic()
        response: Response | None = None
        error: str | None = None

        try:
            response = await call_next(request)
            return response
        except Exception as exc:
            error = str(exc)
            raise
        finally:
            latency_ms = (time.monotonic() - start) * 1000
            status_code = response.status_code if response else 500

            # Client IP (handle proxies)
            client_ip = request.headers.get(
                "x-forwarded-for", request.client.host if request.client else "unknown"
            )
            if "," in client_ip:
                client_ip = client_ip.split(",")[0].strip()

            log_data = {
                "method": request.method,
                "path": path,
                "status": status_code,
                "latency_ms": round(latency_ms, 2),
                "client_ip": client_ip,
                "club_id": request.headers.get(CLUB_HEADER),
            }

            if error:
                log_data["error"] = error

            if status_code >= 500:
                logger.error("api_request", extra=log_data)
            elif status_code >= 400:
                logger.warning("api_request", extra=log_data)
            else:
                logger.info("api_request", extra=log_data)
