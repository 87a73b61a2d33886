"""
Startup probe of the optional conversion libraries.

The probe runs once per process; the resulting registry decides which
strategies make up the conversion chain and whether the optimizer can do
real work, so nothing is re-checked per request.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache

from ocr_pipeline.processors import converters, image_optimizer
from ocr_pipeline.processors.converters import (
    ConversionChain,
    ConversionStrategy,
    DegradedStrategy,
    RasterStrategy,
)
from ocr_pipeline.processors.image_optimizer import ImageOptimizer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Capabilities:
    rasterizer: bool
    image_library: bool

    def as_dict(self) -> dict[str, bool]:
        return {"rasterizer": self.rasterizer, "image_library": self.image_library}


@dataclass(frozen=True)
class ConverterRegistry:
    capabilities: Capabilities
    chain: ConversionChain
    optimizer: ImageOptimizer


@lru_cache(maxsize=1)
def probe_capabilities() -> Capabilities:
    capabilities = Capabilities(
        rasterizer=converters.fitz is not None,
        image_library=converters.Image is not None and image_optimizer.Image is not None,
    )
    logger.info("Conversion capabilities: %s", capabilities.as_dict())
    return capabilities


def build_strategies(capabilities: Capabilities) -> list[ConversionStrategy]:
    strategies: list[ConversionStrategy] = []
    if capabilities.rasterizer:
        strategies.append(RasterStrategy())
    if capabilities.image_library:
        strategies.append(DegradedStrategy())
    return strategies


def build_registry(capabilities: Capabilities | None = None) -> ConverterRegistry:
    capabilities = capabilities or probe_capabilities()
    return ConverterRegistry(
        capabilities=capabilities,
        chain=ConversionChain(build_strategies(capabilities)),
        optimizer=ImageOptimizer(enabled=capabilities.image_library),
    )
