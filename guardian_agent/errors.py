"""Exceptions raised by the analyze pipeline and their HTTP mapping.

Only the session gate rejects a request. Every other collaborator absorbs its
own failures, except the language model call, which has no sensible default.
"""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class GuardianError(Exception):
    """Base class for errors raised by guardian_agent."""


class RequestRejected(GuardianError):
    """The gate refused the request; terminal, never retried."""

    def __init__(self, status_code: int, error: str, details: list[str] | None = None):
        super().__init__(error)
        self.status_code = status_code
        self.error = error
        self.details = details


class InferenceError(GuardianError):
    """The language model call failed, timed out, or returned nothing."""


def setup_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestRejected)
    async def _rejected(request: Request, exc: RequestRejected) -> JSONResponse:
        body: dict[str, object] = {"error": exc.error}
        if exc.details is not None:
            body["details"] = exc.details
        return JSONResponse(status_code=exc.status_code, content=body)

    @app.exception_handler(RequestValidationError)
    async def _invalid_body(request: Request, exc: RequestValidationError) -> JSONResponse:
        details = [
            f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg', 'invalid')}"
            for err in exc.errors()
        ]
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Invalid request body", "details": details},
        )

    @app.exception_handler(InferenceError)
    async def _inference(request: Request, exc: InferenceError) -> JSONResponse:
        logger.error("Inference failed: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"},
        )

    @app.exception_handler(Exception)
    async def _unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s", request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"},
        )
