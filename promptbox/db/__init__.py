"""Database layer — single-connection SQLite pool, migrator and repository."""

from promptbox.db.classifier import classify
from promptbox.db.database import PooledConnection, StoragePool
from promptbox.db.prompt_repo import PromptRepository
from promptbox.db.schema import SCHEMA_DDL, migrate

__all__ = [
    "PooledConnection",
    "PromptRepository",
    "SCHEMA_DDL",
    "StoragePool",
    "classify",
    "migrate",
]
