"""OcrBackend protocol for the external text-recognition service."""

from __future__ import annotations

from typing import Protocol, Sequence

from ocr_pipeline.models.dto import OcrLine


class OcrBackend(Protocol):
    """Abstraction over the OCR service used by the extraction dispatcher.

    Implementations own their timeout and retry budget; failures after that
    budget surface as OcrBackendError.
    """

    async def detect_text(self, document: bytes) -> list[OcrLine]: ...

    async def analyze_document(self, document: bytes, feature_types: Sequence[str]) -> list[OcrLine]: ...
