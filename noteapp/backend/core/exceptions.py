"""
Custom Exceptions.

Application-specific exception classes for consistent error handling.

"Not found" is not an error in this application: lookups return None.
Validation of note titles happens in the editing flow and is surfaced as
UI state, so only storage failures are represented here.
"""


class ApplicationError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, code: str = "SYS_INTERNAL_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


class DatabaseError(ApplicationError):
    """Raised when a notes database operation fails."""

    def __init__(self, message: str = "Database error") -> None:
        super().__init__(message, code="SYS_DATABASE_ERROR")


class StorageError(ApplicationError):
    """Raised when the preference file cannot be read or written."""

    def __init__(self, message: str = "Preference storage error") -> None:
        super().__init__(message, code="SYS_STORAGE_ERROR")
