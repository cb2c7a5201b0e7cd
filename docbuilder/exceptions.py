"""Custom exceptions for docbuilder."""

from typing import Optional


class DocBuilderError(Exception):
    """Base exception for docbuilder errors."""

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class DocumentFormatError(DocBuilderError):
    """Exception raised when a serialized document cannot be parsed."""

    pass


class LayoutError(DocBuilderError):
    """Exception raised during layout editing."""

    pass


class RenderingError(DocBuilderError):
    """Exception raised when an output surface cannot be produced."""

    pass


class ExpressionError(DocBuilderError):
    """Exception raised while evaluating a template expression.

    Never escapes the expression engine; evaluation degrades to an empty string.
    """

    pass


class SignatureError(DocBuilderError):
    """Exception raised for malformed signature artifacts."""

    pass
