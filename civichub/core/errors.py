"""Error taxonomy shared by services and the HTTP layer.

Services raise these; routers let them propagate. ``register_exception_handlers``
turns every ``CivicHubError`` into a ``{"detail", "code"}`` JSON body so callers
always get a tagged failure instead of an unhandled exception.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class CivicHubError(Exception):
    """Base class for all expected, per-operation failures."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    code: str = "error"
    default_detail: str = "Request failed"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class ValidationError(CivicHubError):
    status_code = 422
    code = "validation_error"
    default_detail = "Please fill in all required fields"


class UnauthorizedError(CivicHubError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "unauthorized"
    default_detail = "User not authenticated"


class Unauthenticated(CivicHubError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "unauthenticated"
    default_detail = "Not authenticated"


class ForbiddenError(CivicHubError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "forbidden"
    default_detail = "You do not have permission to perform this action"


class InvalidStatusError(CivicHubError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "invalid_status"
    default_detail = "Unknown report status"


class EmailTakenError(CivicHubError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "email_taken"
    default_detail = "Email already registered"


class NotFoundError(CivicHubError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"
    default_detail = "Report not found"


class ClassificationError(CivicHubError):
    status_code = status.HTTP_502_BAD_GATEWAY
    code = "classification_failed"
    default_detail = "Sentiment analysis failed"


class StoreError(CivicHubError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    code = "store_error"
    default_detail = "Failed to save changes. Please try again."


def register_exception_handlers(app: FastAPI) -> None:
    """Map CivicHubError subclasses to JSON responses."""

    @app.exception_handler(CivicHubError)
    async def civichub_error_handler(request: Request, exc: CivicHubError) -> JSONResponse:
        logger.warning(
            "%s %s -> %s %s: %s",
            request.method,
            request.url.path,
            exc.status_code,
            exc.code,
            exc.detail,
        )
        headers = None
        if exc.status_code == status.HTTP_401_UNAUTHORIZED:
            headers = {"WWW-Authenticate": "Bearer"}
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail, "code": exc.code},
            headers=headers,
        )
