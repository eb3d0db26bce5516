"""
Custom Exceptions.

Application-specific exception classes for consistent error handling.
"""


class ApplicationError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, code: str = "SYS_INTERNAL_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


class AppAlreadyRunningError(ApplicationError):
    """Raised when starting an app whose desired LRP already exists."""

    def __init__(self, process_guid: str) -> None:
        self.process_guid = process_guid
        super().__init__(f"App {process_guid}, is already running", code="APP_ALREADY_RUNNING")


class AppNotStartedError(ApplicationError):
    """Raised when scaling or removing an app that has no desired LRP."""

    def __init__(self, process_guid: str) -> None:
        self.process_guid = process_guid
        super().__init__(
            f"{process_guid}, is not started. Please start an app first",
            code="APP_NOT_STARTED",
        )


class ReceptorError(ApplicationError):
    """Raised when the receptor answers a request with an error status."""

    def __init__(self, message: str, error_type: str = "UnknownError", status_code: int | None = None) -> None:
        self.error_type = error_type
        self.status_code = status_code
        super().__init__(message, code="SYS_RECEPTOR_ERROR")


class LogStreamError(ApplicationError):
    """Error reported by, or about, a live log stream."""

    def __init__(self, message: str = "Log stream error") -> None:
        super().__init__(message, code="LOG_STREAM_ERROR")
