from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

# Load .env if present
load_dotenv()


@dataclass(frozen=True)
class Settings:
    engine: str = os.getenv("REQBRIDGE_ENGINE", "httpx")
    http_timeout: float = float(os.getenv("HTTP_TIMEOUT", "45"))
    stream_cadence: int = int(os.getenv("STREAM_CADENCE", "1"))
    stream_subtype: str = os.getenv("STREAM_SUBTYPE", "text")
    cors_origin: str = os.getenv("CORS_ORIGIN", "*")
    recorder_db_path: str = os.getenv("RECORDER_DB_PATH", "")
    recorder_max_entries: int = int(os.getenv("RECORDER_MAX_ENTRIES", "100"))
    recorder_retention_minutes: int = int(os.getenv("RECORDER_RETENTION_MINUTES", "60"))
    log_level: str = os.getenv("LOG_LEVEL", "INFO")


settings = Settings()
