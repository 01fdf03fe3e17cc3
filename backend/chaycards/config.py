"""Application configuration loaded from environment variables.

Provides type-safe access to configuration with sensible defaults.
"""

import os
from pathlib import Path

from chaycards.domain.constants import DEFAULT_MAX_BACKUPS, DEFAULT_OPERATION_TIMEOUT_SECONDS

FOLDER_STORE_JSON = "json"
FOLDER_STORE_MEMORY = "memory"


def get_data_dir() -> Path:
    """Get the directory holding folder data and backups.

    Environment variable: CHAYCARDS_DATA_DIR
    Default: ~/.chaycards
    """
    return Path(os.getenv("CHAYCARDS_DATA_DIR", "~/.chaycards")).expanduser()


def get_max_backups() -> int:
    """Get number of folder backups to keep.

    Environment variable: CHAYCARDS_MAX_BACKUPS
    Default: 5
    """
    return max(1, int(os.getenv("CHAYCARDS_MAX_BACKUPS", str(DEFAULT_MAX_BACKUPS))))


def get_operation_timeout() -> float | None:
    """Get the per-operation queue timeout in seconds.

    Environment variable: CHAYCARDS_OPERATION_TIMEOUT
    Default: 30. Zero or a negative value disables the timeout.
    """
    timeout = float(
        os.getenv("CHAYCARDS_OPERATION_TIMEOUT", str(DEFAULT_OPERATION_TIMEOUT_SECONDS))
    )
    return timeout if timeout > 0 else None


def get_log_level() -> str:
    """Environment variable: CHAYCARDS_LOG_LEVEL (default INFO)."""
    return os.getenv("CHAYCARDS_LOG_LEVEL", "INFO").upper()


def get_review_db_path() -> Path:
    """Get the SQLite path for card scheduling and review history.

    Environment variable: CHAYCARDS_REVIEW_DB_PATH
    Default: <data dir>/reviews.db
    """
    path = os.getenv("CHAYCARDS_REVIEW_DB_PATH")
    return Path(path).expanduser() if path else get_data_dir() / "reviews.db"


def get_folder_store_kind() -> str:
    """Get which folder store adapter to use.

    Environment variable: CHAYCARDS_FOLDER_STORE (json | memory)
    Default: json
    """
    return os.getenv("CHAYCARDS_FOLDER_STORE", FOLDER_STORE_JSON).lower()
