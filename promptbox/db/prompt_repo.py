"""Repository for the ``prompts`` table — CRUD over the storage pool."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from promptbox.db.database import PooledConnection, StoragePool
from promptbox.db.schema import NOW_MS_SQL
from promptbox.errors import (
    STORAGE_ERRORS,
    ConstraintViolationError,
    InvalidInputError,
    NotFoundError,
)
from promptbox.models.prompt import Prompt, new_prompt_id
from promptbox.validation import validate_prompt_input

logger = logging.getLogger(__name__)

_COLUMNS = "id, name, content, created_at, updated_at"
SQLITE_MAX_INT = 2**63 - 1


class PromptRepository:
    """
    Single-Responsibility repository for prompt persistence.

    Each operation borrows the pooled connection for one statement. Storage
    failures are re-raised as ``InvalidInputError`` so callers only ever see
    ``NotFoundError`` or ``InvalidInputError``.
    """

    def __init__(self, pool: StoragePool):
        self._pool = pool

    @asynccontextmanager
    async def _connection(self, operation: str) -> AsyncIterator[PooledConnection]:
        try:
            async with self._pool.acquire() as conn:
                yield conn
        except ConstraintViolationError as e:
            logger.warning(f"{operation}: constraint {e.constraint} violated: {e.reason}")
            raise InvalidInputError(e.reason) from e
        except STORAGE_ERRORS as e:
            logger.error(f"{operation}: {e.kind.value}: {e.reason}")
            raise InvalidInputError(e.reason) from e

    # -- Create ----------------------------------------------------------------

    async def create(self, name: str, content: str) -> Prompt:
        """Insert a new prompt under a freshly generated id."""
        data = validate_prompt_input(name, content)
        prompt_id = new_prompt_id()
        async with self._connection("create") as conn:
            row = await conn.fetchone(
                f"INSERT INTO prompts (id, name, content) VALUES (?, ?, ?) RETURNING {_COLUMNS}",
                (prompt_id, data.name, data.content),
            )
        if row is None:
            raise InvalidInputError("insert returned no row")
        logger.info(f"Created prompt {prompt_id}: {data.name}")
        return Prompt.from_row(row)

    # -- Read ------------------------------------------------------------------

    async def get_by_id(self, prompt_id: str) -> Prompt:
        async with self._connection("get_by_id") as conn:
            rows = await conn.fetchall(
                f"SELECT {_COLUMNS} FROM prompts WHERE id = ?", (prompt_id,)
            )
        if not rows:
            raise NotFoundError(prompt_id)
        if len(rows) > 1:
            raise RuntimeError(f"primary key {prompt_id!r} matched {len(rows)} rows")
        return Prompt.from_row(rows[0])

    # -- List ------------------------------------------------------------------

    async def list(self, limit: Optional[int] = None) -> list[Prompt]:
        """All prompts, most recently created first."""
        sql = f"SELECT {_COLUMNS} FROM prompts ORDER BY created_at DESC, rowid DESC"
        params: tuple = ()
        if limit is not None:
            if limit < 0:
                raise InvalidInputError("limit must not be negative", field="limit")
            sql += " LIMIT ?"
            params = (min(limit, SQLITE_MAX_INT),)
        async with self._connection("list") as conn:
            rows = await conn.fetchall(sql, params)
        return [Prompt.from_row(r) for r in rows]

    # -- Update ----------------------------------------------------------------

    async def update(self, prompt_id: str, name: str, content: str) -> Prompt:
        """Replace name and content; ``updated_at`` is set by the store."""
        data = validate_prompt_input(name, content)
        async with self._connection("update") as conn:
            row = await conn.fetchone(
                f"""UPDATE prompts
                    SET name = ?, content = ?, updated_at = {NOW_MS_SQL}
                    WHERE id = ?
                    RETURNING {_COLUMNS}""",
                (data.name, data.content, prompt_id),
            )
        if row is None:
            raise NotFoundError(prompt_id)
        logger.info(f"Updated prompt {prompt_id}")
        return Prompt.from_row(row)

    # -- Delete ----------------------------------------------------------------

    async def delete(self, prompt_id: str) -> None:
        async with self._connection("delete") as conn:
            changes = await conn.execute("DELETE FROM prompts WHERE id = ?", (prompt_id,))
        if changes == 0:
            raise NotFoundError(prompt_id)
        logger.info(f"Deleted prompt {prompt_id}")
