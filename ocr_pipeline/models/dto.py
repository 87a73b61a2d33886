"""
Typed contracts passed between the conversion and extraction stages.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, model_validator


class SizeLimits(BaseModel):
    """
    Process-wide byte ceilings for dispatch and conversion eligibility.
    """

    model_config = ConfigDict(frozen=True)

    sync_bytes: int
    async_bytes: int
    min_conversion_bytes: int
    max_conversion_bytes: int

    @model_validator(mode="after")
    def _check_ordering(self) -> "SizeLimits":
        if self.sync_bytes >= self.async_bytes:
            raise ValueError("sync_bytes must be lower than async_bytes")
        if self.min_conversion_bytes >= self.max_conversion_bytes:
            raise ValueError("min_conversion_bytes must be lower than max_conversion_bytes")
        return self


class DocumentProfile(BaseModel):
    """
    Per-document-type OCR and conversion configuration.
    """

    model_config = ConfigDict(frozen=True)

    doc_type: str
    ocr_features: frozenset[str]
    convertible_to_image: bool = False
    conversion_dpi: int = 300


class QualityScore(BaseModel):
    """
    Heuristic OCR suitability of a PDF buffer.
    """

    model_config = ConfigDict(frozen=True)

    score: int = 0
    has_native_text: bool = False
    has_image_objects: bool = False
    image_object_count: int = 0
    is_high_quality: bool = False
    assessment: str = "not assessable"


class ConversionOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    dpi: int = 300
    image_format: str = "png"


class ConversionAttempt(BaseModel):
    """
    Outcome of one strategy invocation inside the conversion chain.
    """

    strategy_name: str
    output_paths: list[Path] = Field(default_factory=list)
    succeeded: bool = False
    error: str | None = None


class ConversionOutcome(BaseModel):
    paths: list[Path]
    attempts: list[ConversionAttempt] = Field(default_factory=list)
    converted: bool = False


class OcrLine(BaseModel):
    """
    A single LINE block returned by the OCR backend.
    """

    model_config = ConfigDict(frozen=True)

    text: str
    confidence: float | None = None


class ExtractionResult(BaseModel):
    """
    Aggregated text and mean line confidence for one document.
    """

    model_config = ConfigDict(frozen=True)

    text: str
    avg_confidence: float = 0.0
    used_analyze: bool = False


class DocumentResult(BaseModel):
    """
    Final result of a pipeline run, returned to the caller.
    """

    run_id: str
    extraction: ExtractionResult
    final_path: Path
    conversion_attempted: bool = False
    conversion_succeeded: bool = False
    timings: dict[str, float] = Field(default_factory=dict)
    duration_seconds: float = 0.0

    @property
    def text(self) -> str:
        return self.extraction.text
