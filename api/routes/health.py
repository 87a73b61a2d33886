from api.schemas import HealthResponse
from core.dependencies import get_registry
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from ocr_pipeline.processors.capabilities import ConverterRegistry

router = APIRouter()


@router.get("/health", response_model=HealthResponse, tags=["health"])
async def health_check(request: Request, registry: ConverterRegistry = Depends(get_registry)):
    ocr_ready = getattr(request.app.state, "runner", None) is not None
    status_code = 200 if ocr_ready else 503

    return JSONResponse(
        status_code=status_code,
        content={
            "status": "healthy" if ocr_ready else "unhealthy",
            "service": "ocr-pipeline-api",
            "version": "1.0.0",
            "capabilities": registry.capabilities.as_dict(),
            "strategies": registry.chain.strategy_names,
        },
    )
