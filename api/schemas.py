"""Pydantic request/response schemas for API endpoints."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ProblemDetail(BaseModel):
    """RFC 7807 Problem Details for HTTP APIs.

    See: https://www.rfc-editor.org/rfc/rfc7807
    """

    type: str = Field(..., description="URI reference identifying the problem type")
    title: str = Field(..., description="Short, human-readable summary of the problem")
    status: int = Field(..., description="HTTP status code for this problem")
    detail: Optional[str] = Field(
        None, description="Localized explanation shown to the operator"
    )
    instance: Optional[str] = Field(
        None, description="Request path where the problem occurred"
    )

    # Extension members (allowed by RFC 7807)
    code: str = Field(..., description="Application-specific error code")
    category: str = Field(..., description="Error category (validation, external_service, ...)")
    retryable: bool = Field(default=False, description="Whether the request can be retried")
    trace_id: Optional[str] = Field(None, description="Trace ID for log correlation")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "type": "/errors/HTML_FILE_DETECTED",
                "title": "HTML content detected instead of a document",
                "status": 422,
                "detail": "Archivo HTML detectado - Revision Manual",
                "instance": "/v1/extract",
                "code": "HTML_FILE_DETECTED",
                "category": "validation",
                "retryable": False,
                "trace_id": "a1b2c3d4-e5f6-7890-abcd-ef1234567890",
            }
        }
    )


class ExtractResponse(BaseModel):
    """Text extracted from an uploaded document."""

    run_id: str
    text: str
    avg_confidence: float = Field(..., description="Mean LINE confidence, 0-100")
    used_analyze: bool
    conversion_attempted: bool
    conversion_succeeded: bool
    duration_seconds: float
    trace_id: Optional[str] = None


class HealthResponse(BaseModel):
    status: str
    service: str
    version: str
    capabilities: dict[str, bool]
    strategies: list[str]
