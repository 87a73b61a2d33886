"""Unit tests for the Textract adapter using botocore's Stubber."""

import boto3
import pytest
from botocore.exceptions import ReadTimeoutError
from botocore.stub import Stubber

from ocr_pipeline.clients.textract_client import TextractClient, parse_line_blocks
from ocr_pipeline.errors.exceptions import OcrBackendError

DOCUMENT = b"%PDF-1.4 fake document bytes"

RESPONSE = {
    "Blocks": [
        {"BlockType": "PAGE", "Id": "p1"},
        {"BlockType": "LINE", "Id": "l1", "Text": "TITULO PROFESIONAL", "Confidence": 99.5},
        {"BlockType": "WORD", "Id": "w1", "Text": "TITULO", "Confidence": 99.9},
        {"BlockType": "LINE", "Id": "l2", "Text": "INGENIERO", "Confidence": 95.5},
    ]
}


@pytest.fixture
def stubbed():
    client = boto3.client(
        "textract",
        region_name="us-east-1",
        aws_access_key_id="testing",
        aws_secret_access_key="testing",
    )
    with Stubber(client) as stubber:
        yield TextractClient(client=client), stubber
        stubber.assert_no_pending_responses()


class TimingOutClient:
    def detect_document_text(self, **kwargs):
        raise ReadTimeoutError(endpoint_url="https://textract.us-east-1.amazonaws.com")


class TestParseLineBlocks:
    """Tests for parse_line_blocks."""

    def test_keeps_only_lines(self):
        """PAGE and WORD blocks are dropped."""
        lines = parse_line_blocks(RESPONSE)

        assert [line.text for line in lines] == ["TITULO PROFESIONAL", "INGENIERO"]
        assert lines[0].confidence == 99.5

    def test_empty_response(self):
        """Missing Blocks yields no lines."""
        assert parse_line_blocks({}) == []


class TestTextractClient:
    """Tests for TextractClient calls."""

    @pytest.mark.asyncio
    async def test_detect_text(self, stubbed):
        """detect_text sends the raw bytes and parses LINE blocks."""
        client, stubber = stubbed
        stubber.add_response("detect_document_text", RESPONSE, {"Document": {"Bytes": DOCUMENT}})

        lines = await client.detect_text(DOCUMENT)

        assert len(lines) == 2

    @pytest.mark.asyncio
    async def test_analyze_document_features(self, stubbed):
        """Feature tags are passed through as a list."""
        client, stubber = stubbed
        stubber.add_response(
            "analyze_document",
            RESPONSE,
            {"Document": {"Bytes": DOCUMENT}, "FeatureTypes": ["FORMS", "TABLES"]},
        )

        lines = await client.analyze_document(DOCUMENT, ("FORMS", "TABLES"))

        assert lines[1].text == "INGENIERO"

    @pytest.mark.asyncio
    async def test_client_error_wrapped(self, stubbed):
        """AWS errors become OCR_FAILED backend errors."""
        client, stubber = stubbed
        stubber.add_client_error(
            "analyze_document",
            service_error_code="InvalidParameterException",
            service_message="bad document",
            http_status_code=400,
        )

        with pytest.raises(OcrBackendError) as exc_info:
            await client.analyze_document(DOCUMENT, ["FORMS"])

        assert exc_info.value.error_code == "OCR_FAILED"
        assert exc_info.value.details["aws_code"] == "InvalidParameterException"
        assert exc_info.value.operation == "analyze"

    @pytest.mark.asyncio
    async def test_timeout_wrapped(self):
        """Read timeouts become OCR_TIMEOUT backend errors."""
        client = TextractClient(client=TimingOutClient())

        with pytest.raises(OcrBackendError) as exc_info:
            await client.detect_text(DOCUMENT)

        assert exc_info.value.error_code == "OCR_TIMEOUT"
        assert exc_info.value.http_status == 504

    def test_client_config_carries_budget(self):
        """Timeout and retries live in the botocore config."""
        client = TextractClient(region_name="us-east-1", timeout_seconds=120, max_retries=5)

        config = client._client.meta.config
        assert config.read_timeout == 120
        assert config.connect_timeout == 10
        assert config.retries["mode"] == "standard"
        assert client.max_retries == 5
