"""Error taxonomy shared by the services and the HTTP layer.

Services raise these; ``register_exception_handlers`` maps them onto JSON
responses so routers never have to translate them one by one.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class EventScaleError(Exception):
    """Base class for every error raised on purpose by this service."""

    status_code = 400
    kind = "error"

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class NotFoundError(EventScaleError):
    """An event, checklist item or scale entry id did not resolve."""

    status_code = 404
    kind = "not_found"


class ValidationFailure(EventScaleError):
    """Input rejected before any write (blank role, blank task, ...)."""

    status_code = 422
    kind = "validation"


class StorageFailure(EventScaleError):
    """Transient backend failure. The same request may be submitted again."""

    status_code = 503
    kind = "storage"
    retryable = True

    def __init__(self, detail: str, cause: Optional[BaseException] = None):
        super().__init__(detail)
        self.cause = cause


class AuthorizationFailure(EventScaleError):
    """Missing or insufficient role/tenant context for an operator action."""

    status_code = 403
    kind = "authorization"


def error_payload(exc: EventScaleError) -> dict:
    payload = {"detail": exc.detail, "error": exc.kind}
    if isinstance(exc, StorageFailure):
        payload["retryable"] = True
    return payload


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(EventScaleError)
    async def eventscale_error_handler(request: Request, exc: EventScaleError):
        if isinstance(exc, StorageFailure):
            logger.error(f"Storage failure on {request.url.path}: {exc.cause or exc.detail}")
        else:
            logger.warning(f"{exc.kind} on {request.url.path}: {exc.detail}")
        return JSONResponse(status_code=exc.status_code, content=error_payload(exc))
