"""Database schema DDL and the idempotent migrator."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from promptbox.db.database import PooledConnection

logger = logging.getLogger(__name__)

# Milliseconds since the Unix epoch, computed by SQLite itself.
NOW_MS_SQL = "CAST((julianday('now') - 2440587.5) * 86400000 AS INTEGER)"

SCHEMA_DDL = f"""
CREATE TABLE IF NOT EXISTS prompts (
    id          TEXT PRIMARY KEY,
    name        TEXT NOT NULL,
    content     TEXT NOT NULL,
    created_at  INTEGER DEFAULT ({NOW_MS_SQL}),
    updated_at  INTEGER DEFAULT ({NOW_MS_SQL})
);

CREATE INDEX IF NOT EXISTS idx_prompts_name ON prompts(name);
CREATE INDEX IF NOT EXISTS idx_prompts_created_at ON prompts(created_at);
"""


async def migrate(conn: "PooledConnection") -> None:
    """Create the prompts table and its indexes if absent (safe to repeat)."""
    await conn.executescript(SCHEMA_DDL)
    logger.info("Schema migration applied")
