"""
Promptbox command-line interface.

Usage:
    promptbox add "greeting" "Say hello politely."
    promptbox list --limit 10
    promptbox view <id>
    promptbox update <id> "greeting" "Say hello."
    promptbox delete <id>
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from typing import Optional, Sequence

from promptbox.config import get_db_path
from promptbox.db.database import StoragePool
from promptbox.db.prompt_repo import PromptRepository
from promptbox.errors import PromptboxError, StartupError
from promptbox.logging_config import configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="promptbox",
        description="Manage stored prompts",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--db",
        type=str,
        default=None,
        help="Database path (default: $PROMPTBOX_DATA_DIR/prompts.sqlite)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    add = sub.add_parser("add", help="Add a prompt")
    add.add_argument("name")
    add.add_argument("content")

    lst = sub.add_parser("list", help="List prompts, newest first")
    lst.add_argument("--limit", type=int, default=None, help="Show at most N prompts")

    view = sub.add_parser("view", help="Show one prompt")
    view.add_argument("id")

    update = sub.add_parser("update", help="Replace a prompt's name and content")
    update.add_argument("id")
    update.add_argument("name")
    update.add_argument("content")

    delete = sub.add_parser("delete", help="Delete a prompt")
    delete.add_argument("id")

    return parser


async def run_command(args: argparse.Namespace, repo: PromptRepository) -> None:
    if args.command == "add":
        prompt = await repo.create(args.name, args.content)
        print(f"Added prompt {prompt.id}")
    elif args.command == "list":
        prompts = await repo.list(limit=args.limit)
        if not prompts:
            print("No prompts found")
        for p in prompts:
            print(f"{p.id}: {p.name}")
    elif args.command == "view":
        prompt = await repo.get_by_id(args.id)
        print(f"Name: {prompt.name}\nContent: {prompt.content}")
    elif args.command == "update":
        prompt = await repo.update(args.id, args.name, args.content)
        print(f"Updated {prompt.id}")
    elif args.command == "delete":
        await repo.delete(args.id)
        print(f"Deleted {args.id}")
    else:
        raise ValueError(f"unknown command: {args.command}")


async def _main(args: argparse.Namespace) -> int:
    pool = StoragePool(args.db or get_db_path())
    try:
        await pool.start()
        await run_command(args, PromptRepository(pool))
    except (PromptboxError, StartupError) as e:
        print(f"Error: {e}")
        return 1
    finally:
        await pool.close()
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging("DEBUG" if args.verbose else "WARNING")
    return asyncio.run(_main(args))


if __name__ == "__main__":
    sys.exit(main())
