"""Machine inventory configuration and feature flags."""

from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass
class MachinesConfig:
    """Runtime configuration for the machine inventory service."""

    # Persistence
    database_url: str = "sqlite:///machines.db"

    # Cloud sync: per-owner provider exports live in <dir>/<owner>/<provider>.{csv,json}
    provider_export_dir: str = ""

    # Access control
    enforce_admin_writes: bool = True

    # Pagination
    max_page_size: int = 1000

    # Logging
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> MachinesConfig:
        """Load configuration from environment variables."""

        def _bool(key: str, default: bool = False) -> bool:
            return os.getenv(key, str(default)).lower() in ("true", "1", "yes")

        def _int(key: str, default: int) -> int:
            try:
                return int(os.getenv(key, str(default)))
            except ValueError:
                return default

        return cls(
            database_url=os.getenv("DATABASE_URL", "sqlite:///machines.db"),
            provider_export_dir=os.getenv("MACHINES_PROVIDER_EXPORT_DIR", ""),
            enforce_admin_writes=_bool("MACHINES_ENFORCE_ADMIN_WRITES", True),
            max_page_size=_int("MACHINES_MAX_PAGE_SIZE", 1000),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
