"""
Configuration for the device ingestion pipeline.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")

RETAIL_BRANDING = "retail branding"
MARKETING_NAME = "marketing name"
MODEL = "model"


@dataclass(frozen=True)
class IngestionConfig:
    """
    Where the supported-devices dataset lives and how to read it.

    ``source_encoding`` is normally left unset so the decoder sniffs the
    byte-order mark; set it only to pin a known encoding.
    """

    source_url: str = os.getenv(
        "DEVICE_SOURCE_URL",
        "https://storage.googleapis.com/play_public/supported_devices.csv",
    )
    timeout_seconds: float = float(os.getenv("DEVICE_SOURCE_TIMEOUT", "60"))
    source_encoding: str | None = os.getenv("DEVICE_SOURCE_ENCODING") or None
    required_columns: tuple[str, str, str] = (RETAIL_BRANDING, MARKETING_NAME, MODEL)


DEFAULT_INGESTION_CONFIG = IngestionConfig()
