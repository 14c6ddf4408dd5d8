from __future__ import annotations
import os
from dotenv import load_dotenv

load_dotenv()


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_list(name: str, default: list[str]) -> list[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return list(default)
    return [p.strip() for p in raw.replace(",", " ").split() if p.strip()]


DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./tasktracker.db")

TOKEN_SECRET = os.getenv("TOKEN_SECRET", "dev-secret-change-me")
TOKEN_MAX_AGE = _env_int("TOKEN_MAX_AGE", 60 * 60 * 24)  # seconds

CORS_ORIGINS = _env_list("CORS_ORIGINS", ["*"])
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

HOST = os.getenv("HOST", "127.0.0.1")
PORT = _env_int("PORT", 3000)
