import time
from typing import Awaitable, Callable, Optional

from loguru import logger as loguru_logger
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs one line per request with status and duration."""

    def __init__(self, app, logger: Optional[object] = None, skip_paths: tuple[str, ...] = ("/v2/health",)):
        super().__init__(app)
        self.logger = (logger or loguru_logger).bind(module="http")
        self.skip_paths = skip_paths

    async def dispatch(self, request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            duration_ms = (time.perf_counter() - start_time) * 1000
            self.logger.exception(
                "{method} {path} -> unhandled error ({duration:.2f} ms)",
                method=request.method,
                path=request.url.path,
                duration=duration_ms,
            )
            raise

        if request.url.path in self.skip_paths:
            return response

        duration_ms = (time.perf_counter() - start_time) * 1000
        self.logger.info(
            "{method} {path} -> {status} ({duration:.2f} ms) [client={client}]",
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            duration=duration_ms,
            client=request.client.host if request.client else "unknown",
        )
        return response
