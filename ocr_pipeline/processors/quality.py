"""
Cheap PDF quality heuristic used to decide whether rasterizing helps OCR.

Only the first bytes of the file are inspected as text: PDF dictionaries
for fonts, image XObjects and stream filters usually sit near the start of
the file, so the markers give a fair signal without parsing the document.
"""

from __future__ import annotations

import logging

from ocr_pipeline.config.settings import HIGH_QUALITY_SCORE, QUALITY_SAMPLE_BYTES
from ocr_pipeline.models.dto import QualityScore

logger = logging.getLogger(__name__)

FONT_MARKERS = ("/Type/Font", "/Subtype/Type1")
XOBJECT_MARKER = "/Type/XObject"
IMAGE_MARKER = "/Subtype/Image"
FLATE_MARKER = "/Filter/FlateDecode"

NATIVE_TEXT_BONUS = 30
IMAGE_OBJECT_PENALTY = 20
COMPRESSION_BONUS = 10
SCANNED_PENALTY = 15
SCANNED_MIN_IMAGES = 2  # more than this many images = probably scanned


class QualityAssessor:
    """Score a PDF buffer's likely OCR suitability."""

    def __init__(self, sample_bytes: int = QUALITY_SAMPLE_BYTES) -> None:
        self.sample_bytes = sample_bytes

    def assess(self, buffer: bytes) -> QualityScore:
        """
        Deterministic score of the first `sample_bytes` of the buffer.

        Never raises: any internal error yields a zero score.
        """
        try:
            return self._score(buffer)
        except Exception as e:
            logger.warning("PDF quality assessment failed: %s", e)
            return QualityScore()

    def _score(self, buffer: bytes) -> QualityScore:
        sample = bytes(buffer[: min(len(buffer), self.sample_bytes)]).decode("latin-1")

        score = 0
        if any(marker in sample for marker in FONT_MARKERS):
            score += NATIVE_TEXT_BONUS

        if XOBJECT_MARKER in sample and IMAGE_MARKER in sample:
            score -= IMAGE_OBJECT_PENALTY

        if FLATE_MARKER in sample:
            score += COMPRESSION_BONUS

        image_count = sample.count(IMAGE_MARKER)
        if image_count > SCANNED_MIN_IMAGES:
            score -= SCANNED_PENALTY

        is_high_quality = score >= HIGH_QUALITY_SCORE
        return QualityScore(
            score=score,
            has_native_text="/Type/Font" in sample,
            has_image_objects=image_count > 0,
            image_object_count=image_count,
            is_high_quality=is_high_quality,
            assessment="native text" if is_high_quality else "probably scanned",
        )
