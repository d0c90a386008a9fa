"""Load seed prompts from a YAML document.

Expected shape::

    prompts:
      - name: greeting
        content: Say hello politely.
"""

from __future__ import annotations

from pathlib import Path

import yaml


def load_seed_prompts(path: Path) -> list[tuple[str, str]]:
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict) or not isinstance(data.get("prompts", []), list):
        raise ValueError(f"{path}: expected a mapping with a 'prompts' list")

    seeds: list[tuple[str, str]] = []
    for entry in data.get("prompts", []):
        if not isinstance(entry, dict):
            raise ValueError(f"{path}: each prompt must be a mapping, got {entry!r}")
        seeds.append((str(entry.get("name") or ""), str(entry.get("content") or "")))
    return seeds
