"""Error taxonomy for catalog sync runs.

Run-level errors abort a sync and propagate to the caller. `DescribeError`
is the only per-item error: it is recorded on the run report and never
escalates.
"""


class SyncError(RuntimeError):
    """Base class for all sync failures."""


class ConfigError(SyncError):
    """Raised when provider configuration is missing or malformed."""


class NotInitializedError(SyncError):
    """Raised when a sync is run without a catalog connection."""


class CredentialsError(SyncError):
    """Raised when short-lived AWS credentials cannot be obtained."""


class ListError(SyncError):
    """Raised when the top-level table listing fails."""


class DescribeError(SyncError):
    """Raised when describing a single table fails."""

    def __init__(self, table_name: str, message: str):
        super().__init__(f"Failed to describe table '{table_name}': {message}")
        self.table_name = table_name


class SubmissionError(SyncError):
    """Raised when the catalog rejects or cannot receive the mutation."""


class SyncCancelledError(SyncError):
    """Raised when a run is cancelled before the mutation is submitted."""
