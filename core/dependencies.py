"""FastAPI dependency injection functions.

Routes receive the shared runner and capability registry from app state,
which keeps them replaceable through `app.dependency_overrides` in tests.
"""

from fastapi import HTTPException, Request, status
from ocr_pipeline.orchestrator import PipelineRunner
from ocr_pipeline.processors.capabilities import ConverterRegistry


async def get_runner(request: Request) -> PipelineRunner:
    """Get the pipeline runner from app state.

    Raises:
        HTTPException: 503 if the OCR backend could not be initialized
    """
    runner = getattr(request.app.state, "runner", None)

    if runner is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="OCR backend unavailable",
        )

    return runner


async def get_registry(request: Request) -> ConverterRegistry:
    registry = getattr(request.app.state, "registry", None)

    if registry is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Conversion registry unavailable",
        )

    return registry
