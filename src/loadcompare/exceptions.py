"""Custom exceptions for the comparison engine."""


class CompareError(Exception):
    """Base exception for failures that abort a comparison run."""
    pass


class ConfigError(CompareError):
    """Exception raised for invalid command line arguments or settings."""
    pass


class RecordingIOError(CompareError):
    """Exception raised when a results directory or recording cannot be read."""
    pass


class DecodeError(CompareError):
    """Exception raised when a recording contains a malformed record."""

    def __init__(self, message: str, path: str = "", record: int = 0):
        super().__init__(message)
        self.path = path
        self.record = record


class RenderError(CompareError):
    """Exception raised when a report cannot be produced or written."""
    pass
