from datetime import time
from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "sqlite+aiosqlite:///./data/busops.sqlite3"
    api_key: str = ""  # shared access code, empty = no check (local dev)
    business_timezone: str = "UTC"
    day_rollover: time = time(0, 0)  # business day starts at this local time
    week_starts_on: Literal["monday", "sunday"] = "monday"
    inspection_history_days: int = 90
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:8000"]
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
