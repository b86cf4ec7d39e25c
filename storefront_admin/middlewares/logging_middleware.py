import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from storefront_admin.utils.logger import get_logger


logger = get_logger("middleware")

API_PREFIX = "/api/v1/"


class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        if not request.url.path.startswith(API_PREFIX):
            return await call_next(request)

        logger.info(f"📥 {request.method} {request.url.path}")
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        status_emoji = "✅" if response.status_code < 400 else "❌"
        logger.info(
            f"{status_emoji} {request.method} {request.url.path} → {response.status_code} "
            f"({elapsed_ms:.1f} ms)"
        )
        return response
