"""
Environment-driven settings.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field


def _env_str(name: str, default: str) -> str:
    return os.environ.get(name, "").strip() or default


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise RuntimeError(f"{name} must be a number, got {raw!r}.") from e


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}.") from e


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name, "").strip().lower()
    if not raw:
        return default
    return raw in {"1", "true", "yes", "on"}


def _env_list(name: str, default: list[str]) -> list[str]:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass(frozen=True)
class Settings:
    products_db_path: str = "produtos.db"
    sqlite_busy_timeout_s: float = 5.0
    host: str = "0.0.0.0"
    port: int = 3001
    log_level: str = "INFO"
    cors_allow_origins: list[str] = field(default_factory=lambda: ["*"])
    seed_on_empty: bool = True

    @classmethod
    def from_env(cls) -> Settings:
        return cls(
            products_db_path=_env_str("PRODUCTS_DB_PATH", "produtos.db"),
            sqlite_busy_timeout_s=_env_float("SQLITE_BUSY_TIMEOUT_S", 5.0),
            host=_env_str("HOST", "0.0.0.0"),
            port=_env_int("PORT", 3001),
            log_level=_env_str("LOG_LEVEL", "INFO").upper(),
            cors_allow_origins=_env_list("CORS_ALLOW_ORIGINS", ["*"]),
            seed_on_empty=_env_bool("SEED_ON_EMPTY", True),
        )
