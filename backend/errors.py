"""Error kinds raised by the KPI tracker and how the API reports them."""

import logging
from fastapi import Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class KpiError(Exception):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(KpiError):
    """Negative hours/budget, malformed date or unresolvable staff reference."""
    status_code = 400


class NotFoundError(KpiError):
    status_code = 404


class ConflictError(KpiError):
    """Write rejected because it would break a uniqueness or reference rule."""
    status_code = 409


async def kpi_error_handler(request: Request, exc: KpiError):
    logger.warning("%s %s rejected: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})
