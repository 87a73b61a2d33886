import logging

from api.schemas import ProblemDetail
from core.middleware import ensure_trace_id
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from ocr_pipeline.errors.exceptions import BaseError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


def _problem_response(problem: ProblemDetail, trace_id: str) -> JSONResponse:
    return JSONResponse(
        status_code=problem.status,
        content=problem.model_dump(exclude_none=True),
        headers={"X-Trace-ID": trace_id},
    )


async def handle_validation_error(request: Request, exc: RequestValidationError):
    """Handler for FastAPI/Pydantic request validation errors."""
    trace_id = ensure_trace_id(request)

    first_error = exc.errors()[0] if exc.errors() else {}
    loc = first_error.get("loc", [])
    field = ".".join(str(loc_part) for loc_part in loc if loc_part not in ("body", "form"))
    msg = first_error.get("msg", "Validation failed")
    detail = f"{field}: {msg}" if field else msg

    logger.warning(
        "Validation error: %s",
        detail,
        extra={"trace_id": trace_id, "http_status": 422},
    )

    problem = ProblemDetail(
        type="/errors/VALIDATION_ERROR",
        title="Request validation failed",
        status=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail=detail,
        instance=request.url.path,
        code="VALIDATION_ERROR",
        category="client_error",
        retryable=False,
        trace_id=trace_id,
    )
    return _problem_response(problem, trace_id)


async def handle_app_error(request: Request, exc: BaseError):
    """Handler for typed pipeline errors."""
    trace_id = ensure_trace_id(request)

    log = logger.warning if exc.http_status < 500 else logger.error
    log(
        "Pipeline error: %s",
        exc.message,
        extra={
            "trace_id": trace_id,
            "error_code": exc.error_code,
            "http_status": exc.http_status,
        },
    )

    problem = ProblemDetail(
        **exc.to_dict(),
        instance=request.url.path,
        trace_id=trace_id,
    )
    return _problem_response(problem, trace_id)


async def handle_http_error(request: Request, exc: StarletteHTTPException):
    """Handler for standard HTTP exceptions (404, 405, 503...)."""
    trace_id = ensure_trace_id(request)

    logger.warning(
        "HTTP exception: %s",
        exc.detail,
        extra={"trace_id": trace_id, "http_status": exc.status_code},
    )

    problem = ProblemDetail(
        type=f"/errors/HTTP_{exc.status_code}",
        title=str(exc.detail),
        status=exc.status_code,
        detail=str(exc.detail),
        code=f"HTTP_{exc.status_code}",
        category="server_error" if exc.status_code >= 500 else "client_error",
        retryable=exc.status_code == status.HTTP_503_SERVICE_UNAVAILABLE,
        instance=request.url.path,
        trace_id=trace_id,
    )
    return _problem_response(problem, trace_id)


async def handle_unknown_error(request: Request, exc: Exception):
    """Handler for unexpected 500 errors."""
    trace_id = ensure_trace_id(request)

    logger.exception(
        "Unexpected error occurred",
        extra={"trace_id": trace_id, "http_status": 500},
    )

    problem = ProblemDetail(
        type="/errors/UNKNOWN_ERROR",
        title="Internal server error",
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Error inesperado, contacte a soporte con el trace ID.",
        code="UNKNOWN_ERROR",
        category="server_error",
        retryable=False,
        instance=request.url.path,
        trace_id=trace_id,
    )
    return _problem_response(problem, trace_id)
