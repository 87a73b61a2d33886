from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from ocr_pipeline.utils.io_utils import file_size, run_blocking

logger = logging.getLogger(__name__)


class ImageSelector:
    """Pick the most complete rendering among generated page images.

    The largest file wins: at the same resolution a bigger image usually
    means more rendered content. Ties keep the first candidate.
    """

    async def select_best(self, paths: Sequence[str | Path], original: str | Path) -> Path:
        original = Path(original)
        candidates = [
            Path(p) for p in paths if Path(p) != original and Path(p).suffix.lower() != ".pdf"
        ]

        if not candidates:
            return original
        if len(candidates) == 1:
            return candidates[0]

        best = original
        max_size = -1
        for candidate in candidates:
            try:
                size = await run_blocking(file_size, candidate)
            except OSError as e:
                logger.warning("Cannot stat %s: %s", candidate, e)
                continue
            if size > max_size:
                max_size = size
                best = candidate

        if max_size < 0:
            logger.warning("No readable candidate image, using original document")
            return original

        logger.info("Selected image: %s", best.name)
        return best
