"""
Shared Domain Constants.

Central location for the tuning values used across domain services.
Intervals are in days; timeouts are in seconds.
"""

# =============================================================================
# SM-2 Scheduling
# =============================================================================
# Quality 0-5, where 3+ counts as a successful recall.

INITIAL_EASE_FACTOR = 2.5
MIN_EASE_FACTOR = 1.3  # Below this the interval growth degenerates
INITIAL_INTERVAL_DAYS = 0.0
FAILED_INTERVAL_DAYS = 1.0  # Forgotten cards come back tomorrow
MIN_QUALITY = 0
MAX_QUALITY = 5
PASSING_QUALITY = 3


# =============================================================================
# Folder Naming
# =============================================================================

COPY_SUFFIX = " (copy)"
NUMBERED_COPY_SUFFIX = " (copy {n})"


# =============================================================================
# Operation Queue
# =============================================================================

DEFAULT_OPERATION_TIMEOUT_SECONDS = 30.0


# =============================================================================
# Tree Store
# =============================================================================

FOLDER_DATA_VERSION = 1
DEFAULT_MAX_BACKUPS = 5
FOLDERS_FILENAME = "folders.json"
BACKUPS_DIRNAME = "backups"
