from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent / ".env")


def _split_origins(raw: str) -> list[str]:
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


@dataclass(frozen=True)
class ApiConfig:
    title: str = "Restaurant Analytics API"
    version: str = "1.0.0"
    host: str = os.getenv("ANALYTICS_HOST", "127.0.0.1")
    port: int = int(os.getenv("ANALYTICS_PORT", "8000"))
    cors_origins: list[str] = field(
        default_factory=lambda: _split_origins(os.getenv("ANALYTICS_CORS_ORIGINS", "*"))
    )


DEFAULT_API_CONFIG = ApiConfig()
