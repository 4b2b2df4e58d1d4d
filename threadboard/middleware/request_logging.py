from fastapi import Request
import logging
import time
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("threadboard")

class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log one line per request with status and latency; headers and bodies are never logged"""

    async def dispatch(self, request: Request, call_next):
        start_time = time.perf_counter()
        client = request.client.host if request.client else "-"

        response = await call_next(request)

        elapsed_ms = (time.perf_counter() - start_time) * 1000
        message = f"{client} {request.method} {request.url.path} -> {response.status_code} in {elapsed_ms:.1f}ms"
        if response.status_code >= 500:
            logger.error(message)
        elif response.status_code >= 400:
            logger.warning(message)
        else:
            logger.info(message)

        return response
