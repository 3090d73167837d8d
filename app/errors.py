"""Error kinds raised by the service layer and their HTTP translation."""
import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

log = structlog.get_logger()


class TodoApiError(Exception):
    status_code = 500

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class ValidationError(TodoApiError):
    """Client input that cannot be accepted (bad id, malformed body)."""

    status_code = 400


class NotFoundError(TodoApiError):
    status_code = 404


class BackendError(TodoApiError):
    """The KV store failed or returned something unusable."""

    status_code = 502


def _format_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        msg = err.get("msg", "invalid value")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts) or "Invalid request"


async def todo_api_error_handler(request: Request, exc: TodoApiError):
    if exc.status_code >= 500:
        log.error("backend error", path=request.url.path, detail=exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    detail = _format_validation_errors(exc)
    return JSONResponse(status_code=ValidationError.status_code, content={"detail": detail})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(TodoApiError, todo_api_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
