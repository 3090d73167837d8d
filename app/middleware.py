import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

log = structlog.get_logger()


class RequestLoggerMiddleware(BaseHTTPMiddleware):
    """Binds a request_id for the request's log events and logs start/end."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)

        start = time.monotonic()
        log.info("request started", method=request.method, path=request.url.path)

        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
        finally:
            log.info(
                "request finished",
                method=request.method,
                path=request.url.path,
                status_code=status_code,
                duration_ms=int((time.monotonic() - start) * 1000),
            )
        response.headers["X-Request-ID"] = request_id
        return response
