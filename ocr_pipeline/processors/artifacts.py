"""
Per-request bookkeeping of files generated during conversion.

One tracker belongs to one pipeline run; nothing here is shared between
concurrent documents.
"""

from __future__ import annotations

import logging
from pathlib import Path

from ocr_pipeline.utils.io_utils import run_blocking

logger = logging.getLogger(__name__)


class ArtifactTracker:
    def __init__(self, source_path: str | Path | None = None) -> None:
        self.source_path = Path(source_path) if source_path else None
        self._paths: list[Path] = []
        self._dirs: list[Path] = []

    @property
    def paths(self) -> list[Path]:
        return list(self._paths)

    def record(self, path: str | Path) -> None:
        """Register a generated file. The source document is never recorded."""
        candidate = Path(path)
        if self.source_path is not None and candidate == self.source_path:
            return
        if candidate not in self._paths:
            self._paths.append(candidate)

    def record_dir(self, path: str | Path) -> None:
        """Register a working directory, removed on cleanup once empty."""
        candidate = Path(path)
        if candidate not in self._dirs:
            self._dirs.append(candidate)

    async def cleanup(self) -> int:
        """
        Delete every recorded file except PDFs, then empty working dirs.

        Per-file failures are logged and do not stop the loop. Safe to call
        more than once.

        Returns:
            Number of files removed
        """
        paths, self._paths = self._paths, []
        dirs, self._dirs = self._dirs, []
        if paths:
            logger.info("Cleaning up %d generated file(s)", len(paths))

        removed = 0
        for path in paths:
            if path.suffix.lower() == ".pdf":
                continue
            try:
                if await run_blocking(path.exists):
                    await run_blocking(path.unlink)
                    removed += 1
                    logger.debug("Artifact removed: %s", path.name)
            except OSError as e:
                logger.warning("Failed to remove %s: %s", path, e)

        for directory in reversed(dirs):
            try:
                if await run_blocking(_is_empty_dir, directory):
                    await run_blocking(directory.rmdir)
            except OSError as e:
                logger.warning("Failed to remove directory %s: %s", directory, e)

        return removed


def _is_empty_dir(path: Path) -> bool:
    return path.is_dir() and not any(path.iterdir())
