# bjjconnect/core/middleware.py
import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

logger = logging.getLogger("bjjconnect.request")


class RequestLogMiddleware(BaseHTTPMiddleware):
    """
    One log line per request: method, path, status and latency.
    Authentication stays in route dependencies.
    """

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            logger.info(
                "request_handled",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "status": status_code,
                    "latency_ms": round((time.perf_counter() - started) * 1000, 2),
                },
            )
