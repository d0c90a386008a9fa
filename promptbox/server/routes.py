"""HTTP routes for ``/api/prompts``."""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Depends, Query, Request, Response
from pydantic import BaseModel

from promptbox.db.prompt_repo import PromptRepository

router = APIRouter(prefix="/api")


class PromptBody(BaseModel):
    name: str
    content: str


def get_repository(request: Request) -> PromptRepository:
    return request.app.state.repository


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/prompts")
async def list_prompts(
    limit: Optional[int] = Query(default=None, ge=0),
    repo: PromptRepository = Depends(get_repository),
) -> list[dict[str, Any]]:
    """List prompts, most recent first; ``?limit=N`` truncates."""
    prompts = await repo.list(limit=limit)
    return [p.to_dict() for p in prompts]


@router.post("/prompts", status_code=201)
async def create_prompt(
    body: PromptBody, repo: PromptRepository = Depends(get_repository)
) -> dict[str, Any]:
    prompt = await repo.create(body.name, body.content)
    return prompt.to_dict()


@router.get("/prompts/{prompt_id}")
async def get_prompt(
    prompt_id: str, repo: PromptRepository = Depends(get_repository)
) -> dict[str, Any]:
    prompt = await repo.get_by_id(prompt_id)
    return prompt.to_dict()


@router.put("/prompts/{prompt_id}")
async def update_prompt(
    prompt_id: str, body: PromptBody, repo: PromptRepository = Depends(get_repository)
) -> dict[str, Any]:
    prompt = await repo.update(prompt_id, body.name, body.content)
    return prompt.to_dict()


@router.delete("/prompts/{prompt_id}", status_code=204)
async def delete_prompt(
    prompt_id: str, repo: PromptRepository = Depends(get_repository)
) -> Response:
    await repo.delete(prompt_id)
    return Response(status_code=204)
