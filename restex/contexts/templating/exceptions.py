"""Custom exceptions for templating context with template references."""

from pathlib import Path
from typing import List, Optional


class InvalidPackageDeclarationError(ValueError):
    """Raised when a string is not a \\usepackage declaration."""

    def __init__(self, declaration: str):
        self.declaration = declaration
        super().__init__(f"Invalid package declaration: {declaration}")


class TemplateLoadError(Exception):
    """
    Exception raised when a template source or the template catalog cannot be read.

    Attributes:
        message: Error description
        source_path: Path that failed to load
        original_error: The underlying I/O or parsing error
    """

    def __init__(
        self,
        message: str,
        source_path: Optional[Path] = None,
        original_error: Optional[Exception] = None,
    ):
        self.message = message
        self.source_path = source_path
        self.original_error = original_error

        parts = [message]

        if source_path:
            parts.append(f"\nSource: {source_path}")

        if original_error:
            parts.append(f"\nOriginal error: {str(original_error)}")

        super().__init__("\n".join(parts))


class TemplateNotRegisteredError(ValueError):
    """
    Exception raised when looking up a template that is not in the registry.

    Attributes:
        template_id: Identifier or path that was requested
        available: Identifiers known to the registry
    """

    def __init__(self, template_id: str, available: Optional[List[str]] = None):
        self.template_id = template_id
        self.available = available or []

        message = f"Template not registered: {template_id}"
        if self.available:
            message += f". Available templates: {self.available}"

        super().__init__(message)
