"""
Centralized error code registry with specifications.

Provides single source of truth for error codes, including Spanish messages
shown to reviewers, error categories (client/server), and retryability flags.
"""

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class ErrorSpec:
    """Specification for a single error type."""

    code: str
    message_es: str  # Spanish message for the review UI
    category: str  # "client_error" or "server_error"
    retryable: bool  # True if request can be retried


class ErrorCode(Enum):
    """Centralized error code registry.

    Usage:
        error_spec = ErrorCode.get_spec("NO_TEXT_EXTRACTED")
        print(error_spec.message_es, error_spec.category, error_spec.retryable)
    """

    # ========================================
    # VALIDATION ERRORS (not retryable)
    # ========================================
    HTML_FILE_DETECTED = ErrorSpec(
        "HTML_FILE_DETECTED",
        "Archivo HTML detectado - Revision Manual",
        "client_error",
        False,
    )
    DOCUMENT_TOO_SMALL = ErrorSpec(
        "DOCUMENT_TOO_SMALL",
        "Documento demasiado pequeño - Revision Manual",
        "client_error",
        False,
    )
    DOCUMENT_TOO_LARGE = ErrorSpec(
        "DOCUMENT_TOO_LARGE",
        "Documento muy grande - Revision Manual",
        "client_error",
        False,
    )
    UNSUPPORTED_FILE_TYPE = ErrorSpec(
        "UNSUPPORTED_FILE_TYPE",
        "Tipo de archivo no soportado - Revision Manual",
        "client_error",
        False,
    )

    # ========================================
    # EXTRACTION ERRORS
    # ========================================
    NO_TEXT_EXTRACTED = ErrorSpec(
        "NO_TEXT_EXTRACTED",
        "Sin texto extraíble - Revision Manual",
        "client_error",
        False,
    )
    OCR_TIMEOUT = ErrorSpec(
        "OCR_TIMEOUT",
        "Tiempo de espera agotado en OCR - Revision Manual",
        "server_error",
        True,
    )
    OCR_FAILED = ErrorSpec(
        "OCR_FAILED",
        "Error en procesamiento - Revision Manual",
        "server_error",
        True,
    )

    # ========================================
    # FALLBACK
    # ========================================
    UNKNOWN_ERROR = ErrorSpec(
        "UNKNOWN_ERROR",
        "Error en procesamiento - Revision Manual",
        "server_error",
        False,
    )

    @classmethod
    def get_spec(cls, code: str) -> ErrorSpec:
        """Get error specification by code string.

        Returns:
            ErrorSpec with category, message, and retryability.
            Returns default spec for unknown codes.
        """
        for error in cls:
            if error.value.code == code:
                return error.value
        return ErrorSpec(code, cls.UNKNOWN_ERROR.value.message_es, "server_error", False)


def make_error(
    code: str, message: str | None = None, details: str | None = None
) -> dict[str, str | None]:
    """Create error dict with code, reviewer message and details."""
    spec = ErrorCode.get_spec(code)
    return {
        "code": spec.code,
        "message": message or spec.message_es,
        "details": details,
    }
