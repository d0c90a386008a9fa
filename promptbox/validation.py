"""Input validation for prompt writes. Runs before any storage access."""

from __future__ import annotations

from typing import Any, NamedTuple

from promptbox.errors import InvalidInputError

EMPTY_VALUES_REASON = "empty values are not allowed"


class PromptInput(NamedTuple):
    name: str
    content: str


def _clean(field: str, value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidInputError(EMPTY_VALUES_REASON, field=field)
    return value.strip()


def validate_prompt_input(name: Any, content: Any) -> PromptInput:
    """Trim both fields; reject either one if nothing is left."""
    return PromptInput(name=_clean("name", name), content=_clean("content", content))
