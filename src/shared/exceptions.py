"""Custom exception hierarchy for QTI package reading.

All package-specific exceptions inherit from QtiPackageError,
enabling consistent error handling and structured error responses.

Exception hierarchy:
    QtiPackageError (base)
    ├── LocateError
    │   ├── PackageNotFoundError
    │   ├── ManifestNotFoundError
    │   └── AssessmentNotFoundError
    ├── DecodeError
    │   ├── MalformedDocumentError
    │   └── TypeMismatchError
    └── PackageReadError
"""

from typing import Any


class QtiPackageError(Exception):
    """Base exception for all package errors.

    Provides structured error information suitable for logging
    and for callers that present or retry failures.

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable error code (the error kind)
        details: Additional context as key-value pairs
    """

    def __init__(
        self,
        message: str,
        error_code: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize package error.

        Args:
            message: Human-readable error description
            error_code: Machine-readable error code (e.g., 'MALFORMED')
            details: Additional context for debugging
        """
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    @property
    def kind(self) -> str:
        """Error kind, same value as error_code."""
        return self.error_code

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for JSON serialization.

        Returns:
            Dictionary with error_code, error_message, and details.
            Note: Uses 'error_message' instead of 'message' to avoid conflicts
            with Python's logging module which reserves 'message' internally.
        """
        return {
            "error_code": self.error_code,
            "error_message": self.message,
            "details": self.details,
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.error_code!r}, {self.message!r})"


class LocateError(QtiPackageError):
    """Raised when the package folder cannot be resolved to its two documents."""


class PackageNotFoundError(LocateError):
    """Raised when the root path is missing or is not a directory."""

    def __init__(self, path: str) -> None:
        super().__init__(
            f"Package folder not found: {path}",
            "NOT_FOUND",
            {"path": path},
        )


class ManifestNotFoundError(LocateError):
    """Raised when no file in the listing looks like a QPL manifest."""

    def __init__(self, folder: str, pattern: str) -> None:
        super().__init__(
            f"No manifest file matching {pattern} in {folder}",
            "MANIFEST_NOT_FOUND",
            {"folder": folder, "pattern": pattern},
        )


class AssessmentNotFoundError(LocateError):
    """Raised when no file in the listing looks like a QTI document."""

    def __init__(self, folder: str, pattern: str) -> None:
        super().__init__(
            f"No assessment file matching {pattern} in {folder}",
            "ASSESSMENT_NOT_FOUND",
            {"folder": folder, "pattern": pattern},
        )


class DecodeError(QtiPackageError):
    """Raised when an XML document cannot be turned into the data model.

    No partially decoded structure is ever returned alongside this error.
    """


class MalformedDocumentError(DecodeError):
    """Raised when the input is not well-formed XML.

    This covers:
    - Unterminated or mismatched tags
    - Invalid encoding
    - Empty input
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, "MALFORMED", details)


class TypeMismatchError(DecodeError):
    """Raised when an integer field holds text that is not an integer."""

    def __init__(self, field: str, value: str) -> None:
        """Initialize type mismatch error.

        Args:
            field: Dotted location of the offending field
            value: Raw source text
        """
        super().__init__(
            f"Expected an integer for {field}, got {value!r}",
            "TYPE_MISMATCH",
            {"field": field, "value": value},
        )


class EncodeError(QtiPackageError):
    """Raised when a model holds text that XML 1.0 cannot represent.

    This covers control characters other than tab, newline and carriage
    return, and lone surrogates.
    """

    def __init__(self, document: str, original_error: Exception) -> None:
        """Initialize encode error.

        Args:
            document: Root element of the document being written
            original_error: The error raised by the XML writer
        """
        super().__init__(
            f"Cannot encode {document}: {original_error}",
            "UNENCODABLE",
            {"document": document, "original_error": str(original_error)},
        )


class PackageReadError(QtiPackageError):
    """Raised when a file or folder exists but cannot be read.

    This covers:
    - Permission errors
    - Files vanishing between listing and reading
    - Other OS-level read failures
    """

    def __init__(self, path: str, original_error: Exception) -> None:
        """Initialize read error.

        Args:
            path: Path that could not be read
            original_error: The underlying OSError
        """
        super().__init__(
            f"Failed to read {path}: {original_error}",
            "IO_ERROR",
            {
                "path": path,
                "original_error": str(original_error),
                "original_error_type": type(original_error).__name__,
            },
        )
        self.original_error = original_error
