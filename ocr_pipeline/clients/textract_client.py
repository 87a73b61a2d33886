import logging
from typing import Any, Callable, Optional, Sequence

import boto3
from botocore.config import Config
from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    ConnectTimeoutError,
    ReadTimeoutError,
)

from core.settings import aws_settings
from ocr_pipeline.config.settings import (
    OCR_CLIENT_MAX_RETRIES,
    OCR_CLIENT_TIMEOUT_SECONDS,
    OCR_CONNECT_TIMEOUT_SECONDS,
    OCR_EXTENDED_MAX_RETRIES,
    OCR_EXTENDED_TIMEOUT_SECONDS,
)
from ocr_pipeline.errors.exceptions import OcrBackendError
from ocr_pipeline.models.dto import OcrLine
from ocr_pipeline.utils.io_utils import run_blocking

logger = logging.getLogger(__name__)


def parse_line_blocks(response: dict) -> list[OcrLine]:
    """Keep only LINE blocks, in response order."""
    lines = []
    for block in response.get("Blocks") or []:
        if not isinstance(block, dict) or block.get("BlockType") != "LINE":
            continue
        lines.append(OcrLine(text=block.get("Text") or "", confidence=block.get("Confidence")))
    return lines


class TextractClient:
    """AWS Textract adapter implementing the OcrBackend protocol.

    The timeout and retry budget are fixed per instance through the botocore
    client config; the pipeline keeps one standard and one extended instance.
    """

    def __init__(
        self,
        region_name: Optional[str] = None,
        timeout_seconds: float = OCR_CLIENT_TIMEOUT_SECONDS,
        max_retries: int = OCR_CLIENT_MAX_RETRIES,
        endpoint_url: Optional[str] = None,
        client: Any = None,
    ) -> None:
        self.timeout_seconds = timeout_seconds
        self.max_retries = max_retries
        self._client = client or boto3.client(
            "textract",
            region_name=region_name,
            endpoint_url=endpoint_url,
            config=Config(
                connect_timeout=OCR_CONNECT_TIMEOUT_SECONDS,
                read_timeout=timeout_seconds,
                retries={"max_attempts": max_retries, "mode": "standard"},
            ),
        )

    def detect_document_text(self, document: bytes) -> list[OcrLine]:
        response = self._call("detect", self._client.detect_document_text, Document={"Bytes": document})
        return parse_line_blocks(response)

    def analyze(self, document: bytes, feature_types: Sequence[str]) -> list[OcrLine]:
        response = self._call(
            "analyze",
            self._client.analyze_document,
            Document={"Bytes": document},
            FeatureTypes=list(feature_types),
        )
        return parse_line_blocks(response)

    async def detect_text(self, document: bytes) -> list[OcrLine]:
        return await run_blocking(self.detect_document_text, document)

    async def analyze_document(self, document: bytes, feature_types: Sequence[str]) -> list[OcrLine]:
        return await run_blocking(self.analyze, document, feature_types)

    def _call(self, operation: str, fn: Callable[..., dict], **params: Any) -> dict:
        logger.debug(
            "Textract %s call: %d bytes, timeout=%ss, retries=%d",
            operation,
            len(params["Document"]["Bytes"]),
            self.timeout_seconds,
            self.max_retries,
        )
        try:
            return fn(**params)
        except (ConnectTimeoutError, ReadTimeoutError) as e:
            raise OcrBackendError(operation, "timeout", details={"reason": str(e)}) from e
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code")
            raise OcrBackendError(operation, "error", details={"reason": str(e), "aws_code": code}) from e
        except BotoCoreError as e:
            raise OcrBackendError(operation, "error", details={"reason": str(e)}) from e


def create_standard_client(
    region_name: Optional[str] = None, endpoint_url: Optional[str] = None
) -> TextractClient:
    return TextractClient(
        region_name=region_name or aws_settings.AWS_REGION,
        timeout_seconds=OCR_CLIENT_TIMEOUT_SECONDS,
        max_retries=OCR_CLIENT_MAX_RETRIES,
        endpoint_url=endpoint_url or aws_settings.TEXTRACT_ENDPOINT_URL,
    )


def create_extended_client(
    region_name: Optional[str] = None, endpoint_url: Optional[str] = None
) -> TextractClient:
    """Client for payloads above the synchronous ceiling."""
    return TextractClient(
        region_name=region_name or aws_settings.AWS_REGION,
        timeout_seconds=OCR_EXTENDED_TIMEOUT_SECONDS,
        max_retries=OCR_EXTENDED_MAX_RETRIES,
        endpoint_url=endpoint_url or aws_settings.TEXTRACT_ENDPOINT_URL,
    )
