from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from ocr_pipeline.clients.ocr_port import OcrBackend
from ocr_pipeline.config.profiles import get_profile
from ocr_pipeline.config.settings import (
    CONVERTED_DIR_SUFFIX,
    DEFAULT_CONVERSION_DPI,
    DEFAULT_IMAGE_FORMAT,
    EXTRACTION_OK_MIN_CHARS,
)
from ocr_pipeline.models.dto import ConversionOptions, DocumentResult, ExtractionResult
from ocr_pipeline.processors.artifacts import ArtifactTracker
from ocr_pipeline.processors.capabilities import ConverterRegistry, build_registry
from ocr_pipeline.processors.decision import ConversionDecisionEngine
from ocr_pipeline.processors.dispatcher import ExtractionDispatcher
from ocr_pipeline.processors.image_selector import ImageSelector
from ocr_pipeline.processors.validation import validate_document
from ocr_pipeline.utils.io_utils import read_bytes, run_blocking
from ocr_pipeline.utils.timing import StageTimers, stage_timer

logger = logging.getLogger(__name__)


def _generate_run_id() -> str:
    return str(uuid.uuid4())


@dataclass
class PipelineContext:
    source_path: Path
    doc_type: Optional[str] = None
    run_id: str = field(default_factory=_generate_run_id)
    work_dir: Optional[Path] = None
    trace_id: Optional[str] = None

    # populated during run
    artifacts: ArtifactTracker = field(init=False)
    timers: StageTimers = field(default_factory=StageTimers)
    t0: float = field(default_factory=time.perf_counter)
    final_path: Optional[Path] = None
    conversion_attempted: bool = False
    conversion_succeeded: bool = False

    def __post_init__(self) -> None:
        self.source_path = Path(self.source_path)
        self.artifacts = ArtifactTracker(self.source_path)

    @property
    def converted_dir(self) -> Path:
        base = Path(self.work_dir) if self.work_dir else self.source_path.parent
        return base / f"{self.source_path.stem}{CONVERTED_DIR_SUFFIX}"

    @property
    def log_extra(self) -> dict:
        return {"run_id": self.run_id, "trace_id": self.trace_id, "doc_type": self.doc_type}


class PipelineRunner:
    """
    Run one document through validation, optional conversion and OCR.

    The runner itself is stateless and shared; everything that belongs to a
    single document lives in its PipelineContext.
    """

    def __init__(
        self,
        dispatcher: ExtractionDispatcher,
        registry: ConverterRegistry | None = None,
        decision: ConversionDecisionEngine | None = None,
        selector: ImageSelector | None = None,
    ) -> None:
        self.dispatcher = dispatcher
        self.registry = registry or build_registry()
        self.decision = decision or ConversionDecisionEngine()
        self.selector = selector or ImageSelector()

    async def run(
        self,
        file_path: str | Path,
        doc_type: Optional[str] = None,
        *,
        work_dir: Optional[Path] = None,
        trace_id: Optional[str] = None,
    ) -> DocumentResult:
        """Process a document and always clean up what the run generated."""
        ctx = PipelineContext(
            source_path=Path(file_path),
            doc_type=doc_type,
            work_dir=work_dir,
            trace_id=trace_id,
        )
        try:
            return await self.process(ctx)
        finally:
            await ctx.artifacts.cleanup()

    async def process(self, ctx: PipelineContext) -> DocumentResult:
        logger.info("Processing %s (type: %s)", ctx.source_path.name, ctx.doc_type, extra=ctx.log_extra)

        with stage_timer(ctx, "validation"):
            buffer = await run_blocking(read_bytes, ctx.source_path)
            validate_document(buffer)

        final_path = ctx.source_path
        with stage_timer(ctx, "decision"):
            should_convert = await self.decision.should_convert(ctx.source_path, ctx.doc_type, buffer)

        if should_convert:
            ctx.conversion_attempted = True
            logger.info("Attempting conversion to image", extra=ctx.log_extra)
            with stage_timer(ctx, "conversion"):
                final_path = await self._convert(ctx)
            ctx.conversion_succeeded = final_path != ctx.source_path
            if not ctx.conversion_succeeded:
                logger.info("Conversion failed, using original document", extra=ctx.log_extra)

        ctx.final_path = final_path
        with stage_timer(ctx, "ocr"):
            extraction = await self.dispatcher.extract(final_path, ctx.doc_type)

        duration = time.perf_counter() - ctx.t0
        _log_extraction_result(ctx, extraction, duration)
        return DocumentResult(
            run_id=ctx.run_id,
            extraction=extraction,
            final_path=final_path,
            conversion_attempted=ctx.conversion_attempted,
            conversion_succeeded=ctx.conversion_succeeded,
            timings=dict(ctx.timers.totals),
            duration_seconds=round(duration, 3),
        )

    async def _convert(self, ctx: PipelineContext) -> Path:
        profile = get_profile(ctx.doc_type)
        options = ConversionOptions(
            dpi=profile.conversion_dpi if profile else DEFAULT_CONVERSION_DPI,
            image_format=DEFAULT_IMAGE_FORMAT,
        )
        output_dir = ctx.converted_dir
        ctx.artifacts.record_dir(output_dir)

        outcome = await self.registry.chain.run(ctx.source_path, output_dir, options, ctx.artifacts)
        target = await self.selector.select_best(outcome.paths, ctx.source_path)
        if target == ctx.source_path:
            return ctx.source_path

        optimized = await self.registry.optimizer.optimize(target)
        ctx.artifacts.record(optimized)
        logger.info("Using converted image: %s", optimized.name, extra=ctx.log_extra)
        return optimized


def _log_extraction_result(ctx: PipelineContext, extraction: ExtractionResult, duration: float) -> None:
    extra = {**ctx.log_extra, "duration_ms": int(duration * 1000), "used_analyze": extraction.used_analyze}
    if len(extraction.text) < EXTRACTION_OK_MIN_CHARS:
        logger.warning(
            "Limited extraction: %d chars in %.2fs (conversion attempted: %s, succeeded: %s)",
            len(extraction.text),
            duration,
            ctx.conversion_attempted,
            ctx.conversion_succeeded,
            extra=extra,
        )
    else:
        logger.info(
            "Extraction OK: %d chars, confidence %.2f%% in %.2fs",
            len(extraction.text),
            extraction.avg_confidence,
            duration,
            extra=extra,
        )


def create_runner(
    backend: OcrBackend,
    extended_backend: OcrBackend | None = None,
    registry: ConverterRegistry | None = None,
) -> PipelineRunner:
    return PipelineRunner(
        dispatcher=ExtractionDispatcher(backend, extended_backend),
        registry=registry,
    )


async def extract_text(
    file_path: str | Path,
    doc_type: Optional[str] = None,
    *,
    runner: PipelineRunner | None = None,
) -> DocumentResult:
    """
    Extract text from a document, converting it to an image when useful.

    Args:
        file_path: Local PDF or image file
        doc_type: Document type tag, drives conversion and analyze features
        runner: Pre-built runner; a Textract-backed one is created otherwise

    Raises:
        BaseError: Typed failure carrying `error_code`
    """
    if runner is None:
        from ocr_pipeline.clients.textract_client import (
            create_extended_client,
            create_standard_client,
        )

        runner = create_runner(create_standard_client(), create_extended_client())
    return await runner.run(file_path, doc_type)
