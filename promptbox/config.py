"""
Central configuration loader.
Reads from environment variables (via .env); validates typed values.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


# ---------------------------------------------------------------------------
# Load .env from repo root (if present)
# ---------------------------------------------------------------------------
_REPO_ROOT = Path(__file__).resolve().parents[1]
load_dotenv(_REPO_ROOT / ".env")

DB_FILENAME = "prompts.sqlite"
MEMORY_DB = ":memory:"


class ConfigError(EnvironmentError):
    """A configuration value is present but unusable."""

    def __init__(self, key: str, reason: str):
        super().__init__(f"{key}: {reason}")
        self.key = key
        self.reason = reason


def _get(key: str, default: Optional[str] = None) -> Optional[str]:
    return os.getenv(key, default)


def _parse_port(raw: str) -> int:
    try:
        port = int(raw)
    except ValueError:
        raise ConfigError("PORT", f"Invalid port number: {raw}") from None
    if port < 1 or port > 65535:
        raise ConfigError("PORT", f"Invalid port number: {raw}")
    return port


# ---------------------------------------------------------------------------
# Application config
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class AppConfig:
    data_dir: Path
    db_path: Path | str
    host: str
    port: int
    log_level: str
    reload: bool

    @property
    def base_url(self) -> str:
        return f"http://{self.host}:{self.port}"


def get_data_dir() -> Path:
    raw = _get("PROMPTBOX_DATA_DIR", default=str(Path.cwd() / "data"))
    return Path(raw.strip())  # type: ignore[union-attr]


def get_db_path() -> Path | str:
    """``PROMPTBOX_DB_PATH`` wins; otherwise ``<data_dir>/prompts.sqlite``."""
    override = _get("PROMPTBOX_DB_PATH")
    if override and override.strip():
        override = override.strip()
        return override if override == MEMORY_DB else Path(override)
    return get_data_dir() / DB_FILENAME


def get_app_config() -> AppConfig:
    return AppConfig(
        data_dir=get_data_dir(),
        db_path=get_db_path(),
        host=_get("HOST", default="localhost"),  # type: ignore[arg-type]
        port=_parse_port(_get("PORT", default="3000")),  # type: ignore[arg-type]
        log_level=_get("LOG_LEVEL", default="INFO").upper(),  # type: ignore[union-attr]
        reload=_get("SERVER_RELOAD", default="false").lower() in ("1", "true", "yes"),  # type: ignore[union-attr]
    )


