from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Sequence

from ocr_pipeline.clients.ocr_port import OcrBackend
from ocr_pipeline.config.profiles import SIZE_LIMITS, get_feature_types
from ocr_pipeline.config.settings import ANALYZE_MIN_BYTES, STRUCTURED_DOC_TYPES
from ocr_pipeline.errors.exceptions import NoTextExtracted
from ocr_pipeline.models.dto import ExtractionResult, OcrLine, SizeLimits
from ocr_pipeline.processors.validation import validate_document
from ocr_pipeline.utils.io_utils import format_bytes, read_bytes, run_blocking

logger = logging.getLogger(__name__)


def aggregate_lines(lines: Sequence[OcrLine], used_analyze: bool = False) -> ExtractionResult:
    """
    Join LINE texts with single spaces and average the reported confidences.

    Lines without a confidence value are left out of the mean.

    Raises:
        NoTextExtracted: If the joined text is empty after trimming
    """
    text = " ".join(line.text for line in lines).strip()
    if not text:
        raise NoTextExtracted()

    confidences = [line.confidence for line in lines if line.confidence is not None]
    avg_confidence = sum(confidences) / len(confidences) if confidences else 0.0
    return ExtractionResult(text=text, avg_confidence=avg_confidence, used_analyze=used_analyze)


class ExtractionDispatcher:
    """
    Route a document to the right OCR operation and aggregate its lines.

    Structured document types and large payloads go through analyze (with
    per-type feature tags); everything else uses plain text detection. A
    failed analyze call falls back to detection exactly once.
    """

    def __init__(
        self,
        backend: OcrBackend,
        extended_backend: OcrBackend | None = None,
        size_limits: SizeLimits = SIZE_LIMITS,
        structured_doc_types: Iterable[str] = STRUCTURED_DOC_TYPES,
        analyze_min_bytes: int = ANALYZE_MIN_BYTES,
    ) -> None:
        self.backend = backend
        self.extended_backend = extended_backend or backend
        self.size_limits = size_limits
        self.structured_doc_types = frozenset(structured_doc_types)
        self.analyze_min_bytes = analyze_min_bytes

    def should_use_analyze(self, size: int, doc_type: str | None) -> bool:
        return (doc_type in self.structured_doc_types) or size >= self.analyze_min_bytes

    def backend_for(self, size: int) -> OcrBackend:
        """Client used for analyze; detection always uses the standard one."""
        if size > self.size_limits.sync_bytes:
            return self.extended_backend
        return self.backend

    async def extract(self, file_path: str | Path, doc_type: str | None = None) -> ExtractionResult:
        buffer = await run_blocking(read_bytes, file_path)
        validate_document(buffer, max_bytes=self.size_limits.async_bytes)

        size = len(buffer)
        if self.should_use_analyze(size, doc_type):
            return await self._extract_with_analyze(buffer, doc_type)
        return await self._extract_with_detect(buffer)

    async def _extract_with_analyze(self, buffer: bytes, doc_type: str | None) -> ExtractionResult:
        feature_types = get_feature_types(doc_type)
        backend = self.backend_for(len(buffer))
        logger.info(
            "Using analyze for %s (%s) with features %s",
            doc_type,
            format_bytes(len(buffer)),
            feature_types,
            extra={"doc_type": doc_type, "size_bytes": len(buffer)},
        )

        try:
            lines = await backend.analyze_document(buffer, feature_types)
            result = aggregate_lines(lines, used_analyze=True)
            self._log_result(result)
            return result
        except Exception as e:
            logger.warning(
                "Analyze failed, falling back to detect: %s",
                e,
                extra={"doc_type": doc_type, "error_code": getattr(e, "error_code", None)},
            )

        return await self._extract_with_detect(buffer)

    async def _extract_with_detect(self, buffer: bytes) -> ExtractionResult:
        lines = await self.backend.detect_text(buffer)
        result = aggregate_lines(lines, used_analyze=False)
        self._log_result(result)
        return result

    @staticmethod
    def _log_result(result: ExtractionResult) -> None:
        logger.info(
            "Extraction completed: %d chars, confidence %.2f%%",
            len(result.text),
            result.avg_confidence,
            extra={"used_analyze": result.used_analyze},
        )
