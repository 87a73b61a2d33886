from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from ocr_pipeline.config.profiles import SIZE_LIMITS
from ocr_pipeline.config.settings import CONVERT_TO_IMAGE_TYPES, QUALITY_THRESHOLD
from ocr_pipeline.models.dto import SizeLimits
from ocr_pipeline.processors.quality import QualityAssessor
from ocr_pipeline.utils.file_detection import is_pdf_file
from ocr_pipeline.utils.io_utils import format_bytes, run_blocking

logger = logging.getLogger(__name__)


class ConversionDecisionEngine:
    """
    Decide whether a document is worth rasterizing before OCR.

    Conversion is only attempted for PDFs of an allow-listed type whose size
    is within the conversion window and whose quality score is below the
    threshold (no usable native text layer).
    """

    def __init__(
        self,
        assessor: QualityAssessor | None = None,
        size_limits: SizeLimits = SIZE_LIMITS,
        quality_threshold: int = QUALITY_THRESHOLD,
        convertible_doc_types: Iterable[str] = CONVERT_TO_IMAGE_TYPES,
    ) -> None:
        self.assessor = assessor or QualityAssessor()
        self.size_limits = size_limits
        self.quality_threshold = quality_threshold
        self.convertible_doc_types = frozenset(convertible_doc_types)

    async def should_convert(self, file_path: str | Path, doc_type: str | None, buffer: bytes) -> bool:
        try:
            return await self._decide(file_path, doc_type, buffer)
        except Exception as e:
            logger.warning("Conversion decision failed, skipping conversion: %s", e)
            return False

    async def _decide(self, file_path: str | Path, doc_type: str | None, buffer: bytes) -> bool:
        if not await run_blocking(is_pdf_file, file_path):
            return False

        if not doc_type or doc_type not in self.convertible_doc_types:
            logger.info("Type %s does not need conversion", doc_type, extra={"doc_type": doc_type})
            return False

        size = len(buffer)
        if size < self.size_limits.min_conversion_bytes:
            logger.info("File too small for conversion: %s", format_bytes(size))
            return False
        if size > self.size_limits.max_conversion_bytes:
            logger.info("File too large for conversion: %s", format_bytes(size))
            return False

        quality = self.assessor.assess(buffer)
        logger.info(
            "PDF quality: %d (%s)",
            quality.score,
            quality.assessment,
            extra={"quality_score": quality.score, "doc_type": doc_type},
        )
        if quality.score < self.quality_threshold:
            logger.info("Low quality PDF, conversion recommended")
            return True

        logger.info("Good quality PDF, conversion not needed")
        return False
