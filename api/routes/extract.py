"""Document text extraction endpoint."""

import logging
import time
from typing import Optional

from api.file_validation import validate_upload_size
from api.schemas import ExtractResponse, ProblemDetail
from core.dependencies import get_runner
from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from ocr_pipeline.orchestrator import PipelineRunner
from services.processor import DocumentProcessor

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post(
    "/v1/extract",
    response_model=ExtractResponse,
    tags=["extraction"],
    responses={
        413: {"description": "Document too large", "model": ProblemDetail},
        415: {"description": "Unsupported file type", "model": ProblemDetail},
        422: {"description": "Invalid document or no text", "model": ProblemDetail},
        502: {"description": "OCR backend failure", "model": ProblemDetail},
        504: {"description": "OCR backend timeout", "model": ProblemDetail},
    },
)
async def extract_document(
    request: Request,
    file: UploadFile = File(..., description="PDF or image file"),
    doc_type: Optional[str] = Form(None, description="Document type tag, e.g. diploma_bachiller"),
    runner: PipelineRunner = Depends(get_runner),
):
    start_time = time.time()
    trace_id = getattr(request.state, "trace_id", None)

    logger.info(
        "[NEW REQUEST] file=%s doc_type=%s",
        file.filename,
        doc_type,
        extra={"trace_id": trace_id, "doc_type": doc_type},
    )

    await validate_upload_size(file)

    processor = DocumentProcessor(runner)
    result = await processor.process_upload(file, doc_type=doc_type or None, trace_id=trace_id)

    response = ExtractResponse(
        run_id=result.run_id,
        text=result.text,
        avg_confidence=round(result.extraction.avg_confidence, 2),
        used_analyze=result.extraction.used_analyze,
        conversion_attempted=result.conversion_attempted,
        conversion_succeeded=result.conversion_succeeded,
        duration_seconds=result.duration_seconds,
        trace_id=trace_id,
    )

    logger.info(
        "[RESPONSE] run_id=%s chars=%d time=%.2fs",
        response.run_id,
        len(response.text),
        time.time() - start_time,
        extra={"trace_id": trace_id, "run_id": response.run_id},
    )
    return response
