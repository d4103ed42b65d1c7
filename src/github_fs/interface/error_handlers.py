"""Global exception handlers — translate domain errors to HTTP responses.

Every provider error maps to one status code; all failures share the
:class:`ErrorResponse` envelope.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from github_fs.domain.exceptions import (
    AlreadyOpenError,
    GitHubFsError,
    HandleNotFoundError,
    InvalidArgumentError,
    InvalidLocatorError,
    MalformedRemoteResponseError,
    NotADirectoryPathError,
    PathNotFoundError,
    ReadOnlyViolationError,
    TransportError,
    UnsupportedOperationError,
)
from github_fs.interface.schemas import ErrorResponse

logger = logging.getLogger(__name__)

_EXCEPTION_STATUS: list[tuple[type[GitHubFsError], int]] = [
    (InvalidLocatorError, 422),
    (InvalidArgumentError, 422),
    (AlreadyOpenError, 409),
    (HandleNotFoundError, 404),
    (PathNotFoundError, 404),
    (NotADirectoryPathError, 409),
    (ReadOnlyViolationError, 405),
    (UnsupportedOperationError, 501),
    (MalformedRemoteResponseError, 502),
    (TransportError, 502),
]


def _error_json(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(message=message).model_dump(),
    )


def _describe(error: dict) -> str:
    # Drop the "query" / "body" prefix: callers know which parameter they sent.
    loc = [str(part) for part in error.get("loc", ()) if part not in ("query", "body")]
    field = ".".join(loc) or "request"
    return f"{field}: {error.get('msg', 'invalid value')}"


def register_error_handlers(app: FastAPI) -> None:
    """Attach exception handlers to the FastAPI application."""

    # ── Domain exceptions ───────────────────────────────────────────────

    def _make_handler(status_code: int):  # type: ignore[no-untyped-def]
        async def handler(request: Request, exc: Exception) -> JSONResponse:
            logger.warning(
                "%s %s -> %d %s: %s",
                request.method,
                request.url.path,
                status_code,
                type(exc).__name__,
                exc,
            )
            return _error_json(status_code, str(exc))

        return handler

    for exc_type, code in _EXCEPTION_STATUS:
        app.add_exception_handler(exc_type, _make_handler(code))

    # ── Missing key, blank locator and other request errors ─────────────

    @app.exception_handler(RequestValidationError)
    async def validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return _error_json(422, "; ".join(_describe(err) for err in exc.errors()))

    # ── Anything the provider did not translate ─────────────────────────

    @app.exception_handler(Exception)
    async def unexpected_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return _error_json(500, f"Internal error while serving {request.url.path}")
