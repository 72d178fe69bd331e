"""Custom exceptions for slackbox."""


class SlackboxError(Exception):
    """Base class for all slackbox errors."""


class SchemaTooNewError(SlackboxError):
    """Raised when the database was written by a newer schema version."""

    def __init__(self, actual_version: int, supported_version: int):
        self.actual_version = actual_version
        self.supported_version = supported_version
        super().__init__(
            f"Actual version {actual_version}, supported version {supported_version}"
        )


class StorageFailure(SlackboxError):
    """Raised when the underlying SQLite engine reports an error."""


class DataIntegrityError(SlackboxError):
    """Raised when stored data violates an invariant the schema should enforce."""
