"""
PDF to image conversion strategies and the fallback chain that runs them.

Strategies are tried strictly one after another: each may write into the
same output directory, so a later strategy only starts once the earlier
one has failed or produced nothing. When nothing works the chain hands back
the original PDF; it never raises.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol, Sequence

from ocr_pipeline.errors.exceptions import ConversionError
from ocr_pipeline.models.dto import ConversionAttempt, ConversionOptions, ConversionOutcome
from ocr_pipeline.processors.artifacts import ArtifactTracker
from ocr_pipeline.utils.io_utils import run_blocking

try:
    import fitz  # PyMuPDF
except ImportError:
    fitz = None

try:
    from PIL import Image
except ImportError:
    Image = None

logger = logging.getLogger(__name__)


class ConversionStrategy(Protocol):
    """One way of turning a PDF into page images."""

    name: str

    async def convert(
        self,
        pdf_path: Path,
        output_dir: Path,
        options: ConversionOptions,
        artifacts: ArtifactTracker,
    ) -> list[Path]: ...


class RasterStrategy:
    """Rasterize every page with PyMuPDF into numbered image files."""

    name = "raster"

    async def convert(
        self,
        pdf_path: Path,
        output_dir: Path,
        options: ConversionOptions,
        artifacts: ArtifactTracker,
    ) -> list[Path]:
        return await run_blocking(self._rasterize, Path(pdf_path), Path(output_dir), options, artifacts)

    def _rasterize(
        self,
        pdf_path: Path,
        output_dir: Path,
        options: ConversionOptions,
        artifacts: ArtifactTracker,
    ) -> list[Path]:
        if fitz is None:
            raise ConversionError(self.name, "PyMuPDF is not installed")
        if not pdf_path.is_file():
            raise ConversionError(self.name, f"PDF not found: {pdf_path}")

        output_dir.mkdir(parents=True, exist_ok=True)
        logger.info(
            "Rasterizing %s at %d dpi",
            pdf_path.name,
            options.dpi,
            extra={"strategy": self.name},
        )

        try:
            doc = fitz.open(str(pdf_path))
        except Exception as e:
            raise ConversionError(self.name, f"cannot open PDF: {e}") from e

        image_paths: list[Path] = []
        try:
            for index, page in enumerate(doc, start=1):
                pix = page.get_pixmap(dpi=options.dpi, alpha=False)
                img_path = output_dir / f"{pdf_path.stem}_page.{index}.{options.image_format}"
                pix.save(str(img_path), output=options.image_format)
                # Registered page by page so partial output is still cleaned up
                artifacts.record(img_path)
                image_paths.append(img_path)
        except Exception as e:
            raise ConversionError(self.name, f"page rendering failed: {e}") from e
        finally:
            doc.close()

        return image_paths


class DegradedStrategy:
    """
    Fallback for environments without a page rasterizer.

    Pillow cannot decode PDF pages, so this strategy converts nothing: it
    hands back the source PDF to signal that no real conversion happened.
    """

    name = "degraded"

    async def convert(
        self,
        pdf_path: Path,
        output_dir: Path,
        options: ConversionOptions,
        artifacts: ArtifactTracker,
    ) -> list[Path]:
        if Image is None:
            raise ConversionError(self.name, "Pillow is not installed")
        logger.warning(
            "No page rasterizer available, using original PDF for %s",
            Path(pdf_path).name,
            extra={"strategy": self.name},
        )
        return [Path(pdf_path)]


class ConversionChain:
    """Run strategies in order and stop at the first one that yields images."""

    def __init__(self, strategies: Sequence[ConversionStrategy]) -> None:
        self.strategies = list(strategies)

    @property
    def strategy_names(self) -> list[str]:
        return [s.name for s in self.strategies]

    async def run(
        self,
        pdf_path: str | Path,
        output_dir: str | Path,
        options: ConversionOptions,
        artifacts: ArtifactTracker,
    ) -> ConversionOutcome:
        pdf_path = Path(pdf_path)
        output_dir = Path(output_dir)
        attempts: list[ConversionAttempt] = []

        for strategy in self.strategies:
            try:
                outputs = await strategy.convert(pdf_path, output_dir, options, artifacts)
            except Exception as e:
                logger.warning(
                    "Strategy %s failed: %s",
                    strategy.name,
                    e,
                    extra={"strategy": strategy.name},
                )
                attempts.append(ConversionAttempt(strategy_name=strategy.name, error=str(e)))
                continue

            generated = [Path(p) for p in outputs if Path(p) != pdf_path]
            for path in generated:
                artifacts.record(path)
            attempts.append(
                ConversionAttempt(
                    strategy_name=strategy.name,
                    output_paths=generated,
                    succeeded=bool(generated),
                )
            )
            if generated:
                logger.info(
                    "Conversion completed: %d image(s)",
                    len(generated),
                    extra={"strategy": strategy.name},
                )
                return ConversionOutcome(paths=generated, attempts=attempts, converted=True)

            logger.info("Strategy %s produced no images", strategy.name, extra={"strategy": strategy.name})

        logger.info("Using original PDF without conversion: %s", pdf_path.name)
        return ConversionOutcome(paths=[pdf_path], attempts=attempts, converted=False)

    async def convert(
        self,
        pdf_path: str | Path,
        output_dir: str | Path,
        options: ConversionOptions,
        artifacts: ArtifactTracker,
    ) -> list[Path]:
        """Paths of the generated images, or `[pdf_path]` when nothing converted."""
        outcome = await self.run(pdf_path, output_dir, options, artifacts)
        return outcome.paths
