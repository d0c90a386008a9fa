"""Prompt domain model — the single persisted record."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Any, Optional


def new_prompt_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True)
class Prompt:
    """A short named text record. ``id`` never changes once assigned."""

    id: str
    name: str
    content: str
    created_at: Optional[int] = None
    updated_at: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "content": self.content,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Prompt":
        return cls(
            id=row["id"],
            name=row["name"],
            content=row["content"],
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )
