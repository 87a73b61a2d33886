"""Document validation shared by the pipeline entry and the OCR dispatcher."""

import logging

from ocr_pipeline.config.settings import ASYNC_BYTES, MIN_DOCUMENT_BYTES
from ocr_pipeline.errors.exceptions import (
    DocumentTooLarge,
    DocumentTooSmall,
    HtmlFileDetected,
    UnsupportedFileType,
)
from ocr_pipeline.utils.file_detection import (
    SUPPORTED_FILE_TYPES,
    FileType,
    detect_file_type_from_bytes,
    looks_like_html,
)
from ocr_pipeline.utils.io_utils import format_bytes

logger = logging.getLogger(__name__)


def validate_document(
    buffer: bytes,
    *,
    min_bytes: int = MIN_DOCUMENT_BYTES,
    max_bytes: int = ASYNC_BYTES,
) -> FileType:
    """Validate a document buffer before any conversion or OCR call.

    Checks run in a fixed order: HTML disguise, minimum size, maximum size,
    magic-byte file type.

    Returns:
        Detected file type tag

    Raises:
        HtmlFileDetected, DocumentTooSmall, DocumentTooLarge, UnsupportedFileType
    """
    if looks_like_html(buffer):
        raise HtmlFileDetected()

    size = len(buffer)
    if size < min_bytes:
        raise DocumentTooSmall(size, min_bytes)
    if size > max_bytes:
        raise DocumentTooLarge(size, max_bytes)

    file_type = detect_file_type_from_bytes(buffer[:8])
    if file_type is None or file_type not in SUPPORTED_FILE_TYPES:
        raise UnsupportedFileType(file_type or "UNKNOWN")

    logger.info(
        "Document validated: type=%s size=%s",
        file_type,
        format_bytes(size),
        extra={"file_type": file_type, "size_bytes": size},
    )
    return file_type
