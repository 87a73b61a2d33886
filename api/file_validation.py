"""Upload checks done before the file is spooled to disk."""

import logging
import os

from fastapi import UploadFile
from ocr_pipeline.config.settings import ASYNC_BYTES
from ocr_pipeline.errors.exceptions import DocumentTooLarge
from ocr_pipeline.utils.io_utils import run_blocking

logger = logging.getLogger(__name__)


def _get_file_size(file: UploadFile) -> int:
    file.file.seek(0, os.SEEK_END)
    size = file.file.tell()
    file.file.seek(0)
    return size


async def validate_upload_size(file: UploadFile) -> int:
    """Reject uploads above the hard ceiling before writing them anywhere.

    Only the ceiling is checked here. HTML disguise, minimum size and magic
    bytes are left to the pipeline so they keep their order for every entry
    point.

    Raises:
        DocumentTooLarge
    """
    size = await run_blocking(_get_file_size, file)
    if size > ASYNC_BYTES:
        raise DocumentTooLarge(size, ASYNC_BYTES)

    logger.info(
        "Upload accepted: %s (%d bytes, %s)",
        file.filename,
        size,
        file.content_type,
        extra={"size_bytes": size},
    )
    return size
