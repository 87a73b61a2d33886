from __future__ import annotations

import logging
from pathlib import Path

from ocr_pipeline.config.settings import (
    OPTIMIZE_JPEG_QUALITY,
    OPTIMIZE_MAX_HEIGHT,
    OPTIMIZE_MAX_WIDTH,
    OPTIMIZE_PNG_COMPRESS_LEVEL,
    OPTIMIZED_SUFFIX,
)
from ocr_pipeline.errors.exceptions import OptimizationError
from ocr_pipeline.utils.io_utils import copy_file, run_blocking

try:
    from PIL import Image, ImageOps
except ImportError:
    Image = None
    ImageOps = None

logger = logging.getLogger(__name__)


def optimized_path_for(image_path: Path) -> Path:
    return image_path.with_name(f"{image_path.stem}{OPTIMIZED_SUFFIX}{image_path.suffix}")


class ImageOptimizer:
    """
    Normalize a page image for OCR submission.

    The image is fitted inside the configured bounds (never enlarged) and
    recompressed. Whenever that is not possible the source is copied
    unchanged, so the returned path is always ready for OCR.
    """

    def __init__(
        self,
        max_width: int = OPTIMIZE_MAX_WIDTH,
        max_height: int = OPTIMIZE_MAX_HEIGHT,
        enabled: bool = True,
    ) -> None:
        self.max_width = max_width
        self.max_height = max_height
        self.enabled = enabled and Image is not None

    async def optimize(self, image_path: str | Path) -> Path:
        image_path = Path(image_path)
        output_path = optimized_path_for(image_path)

        try:
            await run_blocking(self._optimize, image_path, output_path)
            logger.info("Image optimized: %s", output_path.name)
            return output_path
        except OptimizationError as e:
            logger.info("Optimization unavailable (%s), copying image", e)

        try:
            await run_blocking(copy_file, image_path, output_path)
            logger.info("Image copied without optimization: %s", output_path.name)
            return output_path
        except OSError as e:
            logger.warning("Copying image failed, using source as is: %s", e)
            return image_path

    def _optimize(self, image_path: Path, output_path: Path) -> None:
        if not self.enabled:
            raise OptimizationError("Pillow is not available")
        try:
            with Image.open(image_path) as image:
                frame = ImageOps.exif_transpose(image)
                if frame.mode not in ("RGB", "L"):
                    frame = frame.convert("RGB")
                frame.thumbnail((self.max_width, self.max_height))
                self._save(frame, output_path, image.format)
        except Exception as e:
            raise OptimizationError(f"cannot process {image_path.name}: {e}") from e

    def _save(self, frame, output_path: Path, source_format: str | None) -> None:
        if output_path.suffix.lower() in (".jpg", ".jpeg") or source_format == "JPEG":
            frame.save(output_path, format="JPEG", quality=OPTIMIZE_JPEG_QUALITY, optimize=True)
        else:
            frame.save(output_path, format="PNG", compress_level=OPTIMIZE_PNG_COMPRESS_LEVEL)
