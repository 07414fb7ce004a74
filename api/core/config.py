"""
Environment-backed settings.

A `.env` file in the repo root (or the current working directory) is loaded
once on import. Values already present in the process environment win.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

for _path in (
    Path(__file__).resolve().parent.parent.parent / ".env",
    Path.cwd() / ".env",
):
    if _path.exists():
        load_dotenv(_path, override=False)
        break


def env_str(name: str, default: str) -> str:
    return os.environ.get(name, default).strip() or default


def env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def service_name() -> str:
    return env_str("SERVICE_NAME", "contactService")


def log_level() -> str:
    return env_str("LOG_LEVEL", "INFO").upper()


def repository_timeout_s() -> float:
    """
    Upper bound for one repository operation (its whole transaction body).
    """
    value = env_float("REPOSITORY_TIMEOUT_S", 30.0)
    return value if value > 0 else 30.0


def cors_origins() -> list[str]:
    raw = os.environ.get("CORS_ORIGINS", "").strip()
    if not raw:
        return ["http://localhost:5173", "http://127.0.0.1:5173"]
    return [origin.strip() for origin in raw.split(",") if origin.strip()]
