import structlog
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from .exceptions import DomainError

logger = structlog.get_logger(__name__)


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "code": exc.code},
    )


async def internal_error_handler(request: Request, exc: Exception) -> JSONResponse:
    # Never leak internals to the client; the log line carries the context
    logger.exception(
        "unhandled_error",
        method=request.method,
        path=request.url.path,
        error=repr(exc),
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error", "code": "INTERNAL"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(Exception, internal_error_handler)
