from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


def normalize_database_url(raw_url: str) -> str:
    cleaned = re.sub(r"\s+", "", (raw_url or "").strip())
    if cleaned.startswith("postgres://"):
        cleaned = "postgresql://" + cleaned[len("postgres://") :]
    return cleaned


@dataclass(frozen=True)
class StorageConfig:
    database_url: str = normalize_database_url(
        os.getenv("DATABASE_URL", "sqlite:///./devices.db")
    )
    echo: bool = os.getenv("DATABASE_ECHO", "").strip().lower() in {"1", "true", "yes", "on"}
    pool_recycle: int = int(os.getenv("DB_POOL_RECYCLE", "1800"))


DEFAULT_STORAGE_CONFIG = StorageConfig()
