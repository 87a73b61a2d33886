"""Wrapper around the pipeline runner for FastAPI uploads."""

import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

from core.settings import app_settings
from fastapi import UploadFile
from ocr_pipeline.models.dto import DocumentResult
from ocr_pipeline.orchestrator import PipelineRunner
from ocr_pipeline.utils.io_utils import run_blocking

logger = logging.getLogger(__name__)


def _write_temp_file(content: bytes, filename: Optional[str], work_dir: Optional[Path]) -> str:
    suffix = f"_{Path(filename).name}" if filename else ".bin"
    with tempfile.NamedTemporaryFile(delete=False, suffix=suffix, dir=work_dir) as temp_file:
        temp_file.write(content)
        return temp_file.name


async def _save_upload_to_temp(file: UploadFile, work_dir: Optional[Path] = None) -> str:
    """Save uploaded file to temporary location.

    Returns:
        Absolute path to temporary file
    """
    content = await file.read()
    return await run_blocking(_write_temp_file, content, file.filename, work_dir)


def _remove_temp_file(tmp_path: str, trace_id: Optional[str]) -> None:
    try:
        os.remove(tmp_path)
    except OSError:
        logger.warning("Failed to cleanup temp file: %s", tmp_path, extra={"trace_id": trace_id})


class DocumentProcessor:
    """Runs uploaded documents through the extraction pipeline."""

    def __init__(self, runner: PipelineRunner, work_dir: Optional[Path] = None):
        self.runner = runner
        self.work_dir = work_dir if work_dir is not None else app_settings.work_dir

    async def process_upload(
        self,
        file: UploadFile,
        doc_type: Optional[str] = None,
        trace_id: Optional[str] = None,
    ) -> DocumentResult:
        """
        Spool the upload to disk, extract its text and remove the temp file.

        The uploaded file is the pipeline's source document, so the runner
        never deletes it; this wrapper does once the run is over.
        """
        tmp_path = await _save_upload_to_temp(file, self.work_dir)
        try:
            return await self.runner.run(
                tmp_path,
                doc_type,
                work_dir=self.work_dir,
                trace_id=trace_id,
            )
        finally:
            await run_blocking(_remove_temp_file, tmp_path, trace_id)
