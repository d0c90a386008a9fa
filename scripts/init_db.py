#!/usr/bin/env python3
"""Initialize the database and optionally seed it with prompts from a YAML file."""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from promptbox.config import get_db_path
from promptbox.db.database import StoragePool
from promptbox.db.prompt_repo import PromptRepository
from promptbox.errors import InvalidInputError
from promptbox.seed import load_seed_prompts


def main():
    parser = argparse.ArgumentParser(description="Initialize the database")
    parser.add_argument("--seed-prompts", type=str, help="YAML file with prompt definitions")
    parser.add_argument("--db-path", type=str, help="Override database path")
    args = parser.parse_args()

    asyncio.run(_run(args))


async def _run(args: argparse.Namespace) -> None:
    pool = StoragePool(args.db_path or get_db_path())
    try:
        await pool.start()
        print(f"Database initialized at: {pool.path}")
        if args.seed_prompts:
            await _seed_prompts(PromptRepository(pool), Path(args.seed_prompts))
    finally:
        await pool.close()
    print("Done.")


async def _seed_prompts(repo: PromptRepository, path: Path) -> None:
    for name, content in load_seed_prompts(path):
        try:
            prompt = await repo.create(name, content)
            print(f"  Created prompt: {prompt.name} ({prompt.id})")
        except InvalidInputError as e:
            print(f"  Skipping {name or '?'}: {e.reason}")


if __name__ == "__main__":
    main()
