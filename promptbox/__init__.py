"""Promptbox — a small store of named text prompts with an HTTP API and a CLI."""

__version__ = "1.0.0"
