from __future__ import annotations

import os
from dotenv import load_dotenv
from pydantic import BaseModel

# Load environment variables from .env (if present)
load_dotenv()


class Settings(BaseModel):
    # API key for this FastAPI server (sent via X-API-Key header)
    api_key: str = os.getenv("ADB_API_KEY", "")

    # CORS origins (comma-separated or "*")
    cors_origins: str = os.getenv("CORS_ORIGINS", "*")

    # adb binary and per-call timeout in seconds
    adb_path: str = os.getenv("ADB_PATH", "adb")
    adb_timeout: float = float(os.getenv("ADB_TIMEOUT", "30"))

    # Initially selected device serial (empty: let adb pick the only device)
    adb_serial: str = os.getenv("ADB_SERIAL", "")

    # Optional YAML file with extra natural-language phrases
    commands_file: str = os.getenv("ADB_COMMANDS_FILE", "")

    log_level: str = os.getenv("LOG_LEVEL", "INFO")


settings = Settings()
