"""Exception hierarchy for the conversion and extraction pipeline.

Errors that terminate a document (validation, no text, backend exhaustion)
inherit from BaseError and carry structured information compatible with
RFC 7807 Problem Details. Conversion and optimization failures are
recoverable inside the pipeline and inherit from PipelineError only.
"""

from enum import Enum
from typing import Any, Optional

from ocr_pipeline.errors.codes import ErrorCode


class ErrorCategory(str, Enum):
    """Error categories for classification and monitoring."""

    CLIENT_ERROR = "client_error"
    SERVER_ERROR = "server_error"
    EXTERNAL_SERVICE = "external_service"
    VALIDATION = "validation"


class PipelineError(Exception):
    """Base for every error raised inside the pipeline."""


class BaseError(PipelineError):
    """Base exception for errors surfaced to the caller.

    Attributes:
        message: Human-readable error message
        error_code: Application-specific error code
        category: Error category for classification
        http_status: HTTP status code to return
        details: Additional context (dict)
        retryable: Whether the operation can be retried
    """

    def __init__(
        self,
        message: str,
        error_code: str,
        category: ErrorCategory,
        http_status: int,
        details: Optional[dict[str, Any]] = None,
        retryable: bool = False,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.category = category
        self.http_status = http_status
        self.details = details or {}
        self.retryable = retryable

    @property
    def user_message(self) -> str:
        return ErrorCode.get_spec(self.error_code).message_es

    def to_dict(self) -> dict[str, Any]:
        """Convert to RFC 7807 Problem Details format."""
        return {
            "type": f"/errors/{self.error_code}",
            "title": self.message,
            "status": self.http_status,
            "code": self.error_code,
            "detail": self.details.get("detail") or self.user_message,
            "category": self.category.value,
            "retryable": self.retryable,
        }


# ========================================
# Validation (fatal, never retried)
# ========================================


class DocumentValidationError(BaseError):
    """The input document cannot be processed at all."""

    def __init__(self, message: str, error_code: str, **kwargs):
        super().__init__(
            message=message,
            error_code=error_code,
            category=ErrorCategory.VALIDATION,
            http_status=kwargs.pop("http_status", 422),
            retryable=False,
            **kwargs,
        )


class HtmlFileDetected(DocumentValidationError):
    """An HTML page (usually a login or share page) was saved as the document."""

    def __init__(self, **kwargs):
        super().__init__("HTML content detected instead of a document", "HTML_FILE_DETECTED", **kwargs)


class DocumentTooSmall(DocumentValidationError):
    def __init__(self, size_bytes: int, min_bytes: int):
        super().__init__(
            f"Document too small: {size_bytes} bytes (min: {min_bytes})",
            "DOCUMENT_TOO_SMALL",
            details={"size_bytes": size_bytes, "min_bytes": min_bytes},
        )


class DocumentTooLarge(DocumentValidationError):
    def __init__(self, size_bytes: int, max_bytes: int):
        super().__init__(
            f"Document too large: {size_bytes} bytes (max: {max_bytes})",
            "DOCUMENT_TOO_LARGE",
            http_status=413,
            details={"size_bytes": size_bytes, "max_bytes": max_bytes},
        )


class UnsupportedFileType(DocumentValidationError):
    def __init__(self, file_type: str):
        super().__init__(
            f"Unsupported file type: {file_type}",
            "UNSUPPORTED_FILE_TYPE",
            http_status=415,
            details={"file_type": file_type, "expected_types": ["PDF", "PNG", "JPEG", "TIFF"]},
        )
        self.file_type = file_type


# ========================================
# Extraction
# ========================================


class ExtractionError(BaseError):
    """Text extraction failed for the current document."""

    def __init__(self, message: str, error_code: str, **kwargs):
        super().__init__(
            message=message,
            error_code=error_code,
            category=ErrorCategory.CLIENT_ERROR,
            http_status=kwargs.pop("http_status", 422),
            retryable=False,
            **kwargs,
        )


class NoTextExtracted(ExtractionError):
    def __init__(self, **kwargs):
        super().__init__("No text could be extracted from the document", "NO_TEXT_EXTRACTED", **kwargs)


class OcrBackendError(BaseError):
    """OCR backend failure after the client's own retry budget (502 / 504).

    Args:
        operation: Backend operation that failed ("detect" or "analyze")
        error_type: "timeout" or "error"
        details: Additional error context
    """

    def __init__(self, operation: str, error_type: str = "error", **kwargs):
        http_status = 504 if error_type == "timeout" else 502
        additional_details = kwargs.pop("details", {})
        additional_details.update({"service": "textract", "operation": operation, "error_type": error_type})
        super().__init__(
            message=f"Textract {operation} {error_type}",
            error_code="OCR_TIMEOUT" if error_type == "timeout" else "OCR_FAILED",
            category=ErrorCategory.EXTERNAL_SERVICE,
            http_status=http_status,
            retryable=True,
            details=additional_details,
            **kwargs,
        )
        self.operation = operation


# ========================================
# Recoverable (absorbed inside the pipeline)
# ========================================


class ConversionError(PipelineError):
    """A conversion strategy could not produce images; the chain moves on."""

    def __init__(self, strategy: str, reason: str):
        super().__init__(f"{strategy}: {reason}")
        self.strategy = strategy
        self.reason = reason


class OptimizationError(PipelineError):
    """Image optimization failed; the optimizer falls back to a copy."""
