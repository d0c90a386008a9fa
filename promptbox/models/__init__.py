"""Domain models for the prompt store."""

from promptbox.models.prompt import Prompt, new_prompt_id

__all__ = ["Prompt", "new_prompt_id"]
