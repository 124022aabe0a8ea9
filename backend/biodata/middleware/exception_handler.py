"""Exception handler rendering BiodataException as the standard error body."""

import logging
from fastapi import Request
from fastapi.responses import JSONResponse
from ..exceptions import BiodataException

logger = logging.getLogger(__name__)


async def biodata_exception_handler(request: Request, exc: BiodataException) -> JSONResponse:
    """Convert a service exception into ``{"error", "message", "details"}``.

    Client errors are logged at WARNING, anything else at ERROR.
    """
    level = logging.WARNING if exc.status_code < 500 else logging.ERROR
    logger.log(
        level,
        "%s: %s",
        exc.error_code.value,
        exc.message,
        extra={
            "error_code": exc.error_code.value,
            "path": request.url.path,
            "method": request.method,
            "details": exc.details,
            "status_code": exc.status_code,
        },
    )

    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
        headers=headers,
    )
