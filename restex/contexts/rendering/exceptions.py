"""Custom exceptions for the rendering context."""

from enum import Enum
from pathlib import Path
from typing import List, Optional


class ErrorKind(str, Enum):
    """Classification of a failed compile attempt."""

    PACKAGE_ERROR = "PACKAGE_ERROR"
    FONT_ERROR = "FONT_ERROR"
    COMPILATION_ERROR = "COMPILATION_ERROR"
    NONE = "NONE"

    @property
    def is_actionable(self) -> bool:
        """Package and font errors are fixed by installing a dependency."""
        return self in (ErrorKind.PACKAGE_ERROR, ErrorKind.FONT_ERROR)


class LatexCompilationError(Exception):
    """
    Exception raised when every compile attempt failed.

    Attributes:
        message: Error description
        kind: Classification of the last attempt
        log_path: Saved log of the last attempt
        attempts: Every CompilationAttempt of the run
    """

    def __init__(
        self,
        message: str,
        kind: ErrorKind = ErrorKind.COMPILATION_ERROR,
        log_path: Optional[Path] = None,
        attempts: Optional[List] = None,
    ):
        self.message = message
        self.kind = kind
        self.log_path = log_path
        self.attempts = attempts or []

        parts = [message, f"\nKind: {kind.value}"]

        if log_path:
            parts.append(f"Log: {log_path}")

        super().__init__("\n".join(parts))

    @property
    def code(self) -> str:
        return self.kind.value


class AttemptFailed(Exception):
    """Internal signal that one compile attempt failed and may be retried."""

    def __init__(self, attempt, log_path: Optional[Path] = None):
        self.attempt = attempt
        self.log_path = log_path
        super().__init__(f"Attempt {attempt.attempt_number} failed: {attempt.classified_kind.value}")


class RasterizationError(Exception):
    """Raised when a compiled PDF cannot be converted to preview images."""
