"""Translate domain failures into HTTP responses."""

from __future__ import annotations

from typing import Any

from fastapi.responses import JSONResponse

from promptbox.errors import ErrorKind, InvalidInputError, NotFoundError, PromptboxError

# Every ErrorKind has an entry; storage kinds should never get this far.
STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.INVALID_INPUT: 400,
    ErrorKind.CONNECTION_FAILED: 500,
    ErrorKind.QUERY_FAILED: 500,
    ErrorKind.CONSTRAINT_VIOLATION: 500,
}


def error_body(error: PromptboxError) -> dict[str, Any]:
    if isinstance(error, NotFoundError):
        return {"error": "Prompt not found", "details": {"id": error.id}}
    if isinstance(error, InvalidInputError):
        return {"error": "Validation failed", "details": error.reason}
    return {"error": "Database error", "details": error.reason}


def error_response(error: PromptboxError) -> JSONResponse:
    return JSONResponse(error_body(error), status_code=STATUS_BY_KIND[error.kind])


def internal_error_response() -> JSONResponse:
    return JSONResponse({"error": "Internal server error"}, status_code=500)
