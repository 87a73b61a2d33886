"""Per-stage wall-clock timings for a pipeline run."""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Iterator, Optional

logger = logging.getLogger(__name__)


class StageTimers:
    """Elapsed seconds per stage name; repeated stages accumulate."""

    def __init__(self) -> None:
        self.totals: dict[str, float] = {}

    def add(self, name: str, seconds: float) -> None:
        self.totals[name] = self.totals.get(name, 0.0) + seconds

    def as_millis(self) -> dict[str, int]:
        return {name: int(seconds * 1000) for name, seconds in self.totals.items()}


@contextmanager
def stage_timer(ctx, name: str, extra: Optional[dict] = None) -> Iterator[None]:
    """
    Time a pipeline stage into `ctx.timers` and log its duration.

    The stage is recorded and logged even when its body raises, so failed
    runs still show where the time went.

    Args:
      ctx: Pipeline context carrying `timers` and `log_extra`.
      name: Stage identifier ("validation", "decision", "conversion", "ocr").
      extra: Additional log fields merged over the context's own.
    """
    started = time.perf_counter()
    try:
        yield
    finally:
        elapsed = time.perf_counter() - started
        ctx.timers.add(name, elapsed)
        fields = {**getattr(ctx, "log_extra", {}), **(extra or {}), "duration_ms": int(elapsed * 1000)}
        logger.debug("Stage %s finished in %.3fs", name, elapsed, extra=fields)
