from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "perflog"
    environment: str = "development"
    log_config_path: Optional[Path] = None
    log_level: str = "INFO"
    log_dir: Path = Path("logs")
    enable_file_logging: bool = False
    enable_json_logs: bool = True

    # Performance tracking
    perf_logging_enabled: bool = True  # Read again from PERF_LOGGING_ENABLED on every track()
    perf_type_name: str = "Performance"  # Routing label passed to the collector
    perf_collector: str = "logging"  # "memory" | "logging" | "jsonl"
    perf_output_dir: Path = Path("logs/performance")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
