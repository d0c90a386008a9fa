"""Error taxonomy shared by the storage layer, repository, router and CLI."""

from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    CONNECTION_FAILED = "connection-failed"
    QUERY_FAILED = "query-failed"
    CONSTRAINT_VIOLATION = "constraint-violation"
    NOT_FOUND = "not-found"
    INVALID_INPUT = "invalid-input"


class PromptboxError(Exception):
    """Base class for every classified failure in the application."""

    kind: ErrorKind

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.reason}"


# -- storage-level kinds (never leave the repository raw) ----------------------

class ConnectionFailedError(PromptboxError):
    kind = ErrorKind.CONNECTION_FAILED


class QueryFailedError(PromptboxError):
    kind = ErrorKind.QUERY_FAILED

    def __init__(self, reason: str, query: Optional[str] = None):
        super().__init__(reason)
        self.query = query


class ConstraintViolationError(PromptboxError):
    kind = ErrorKind.CONSTRAINT_VIOLATION

    def __init__(self, constraint: str, reason: str):
        super().__init__(reason)
        self.constraint = constraint


# -- domain kinds --------------------------------------------------------------

class NotFoundError(PromptboxError):
    kind = ErrorKind.NOT_FOUND

    def __init__(self, id: str, resource: str = "prompt"):
        super().__init__(f"{resource} {id!r} not found")
        self.id = id
        self.resource = resource


class InvalidInputError(PromptboxError):
    kind = ErrorKind.INVALID_INPUT

    def __init__(self, reason: str, field: Optional[str] = None):
        super().__init__(reason)
        self.field = field


STORAGE_ERRORS = (ConnectionFailedError, QueryFailedError, ConstraintViolationError)


class StartupError(RuntimeError):
    """The store could not be opened or migrated; nothing may be served."""
