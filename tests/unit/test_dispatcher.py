"""Unit tests for OCR dispatch and result aggregation."""

import pytest

from ocr_pipeline.errors.exceptions import NoTextExtracted, OcrBackendError, UnsupportedFileType
from ocr_pipeline.models.dto import OcrLine, SizeLimits
from ocr_pipeline.processors.dispatcher import ExtractionDispatcher, aggregate_lines

from conftest import build_pdf_bytes

LINES = [OcrLine(text="REPUBLICA DE COLOMBIA", confidence=99.0), OcrLine(text="DIPLOMA", confidence=97.0)]
SMALL_LIMITS = SizeLimits(sync_bytes=1000, async_bytes=10_000, min_conversion_bytes=100, max_conversion_bytes=5000)


class TestAggregateLines:
    """Tests for aggregate_lines."""

    def test_join_and_mean(self):
        """Lines joined by one space, confidences averaged."""
        result = aggregate_lines(LINES)

        assert result.text == "REPUBLICA DE COLOMBIA DIPLOMA"
        assert result.avg_confidence == 98.0
        assert result.used_analyze is False

    def test_missing_confidence_excluded(self):
        """Lines without confidence do not drag the mean down."""
        result = aggregate_lines([OcrLine(text="a", confidence=90.0), OcrLine(text="b")])

        assert result.avg_confidence == 90.0

    def test_no_confidence_at_all(self):
        """Mean defaults to zero."""
        assert aggregate_lines([OcrLine(text="a")]).avg_confidence == 0.0

    @pytest.mark.parametrize("lines", [[], [OcrLine(text="   ")]])
    def test_empty_text_raises(self, lines):
        """Blank output is a NoTextExtracted error."""
        with pytest.raises(NoTextExtracted):
            aggregate_lines(lines)


class TestExtractionDispatcher:
    """Tests for ExtractionDispatcher.extract."""

    @pytest.mark.asyncio
    async def test_small_unstructured_uses_detect(self, write_file, make_backend):
        """Below 1 MiB and not structured goes to detect."""
        backend = make_backend(detect_lines=LINES)
        path = write_file("doc.pdf", build_pdf_bytes(size=500))

        result = await ExtractionDispatcher(backend).extract(path, "cedula")

        assert result.used_analyze is False
        assert [c[0] for c in backend.calls] == ["detect"]

    @pytest.mark.asyncio
    async def test_structured_type_uses_analyze_features(self, write_file, make_backend):
        """Structured types always go to analyze with their feature tags."""
        backend = make_backend(analyze_lines=LINES)
        path = write_file("doc.pdf", build_pdf_bytes(size=500))

        result = await ExtractionDispatcher(backend).extract(path, "soporte_prueba_saberProtyt")

        assert result.used_analyze is True
        assert backend.calls == [("analyze", 500, ["FORMS", "LAYOUT", "TABLES"])]

    @pytest.mark.asyncio
    async def test_large_document_uses_analyze_default_features(self, write_file, make_backend):
        """At 1 MiB analyze is used even for unknown types."""
        backend = make_backend(analyze_lines=LINES)
        path = write_file("doc.pdf", build_pdf_bytes(size=1024 * 1024))

        await ExtractionDispatcher(backend).extract(path, None)

        assert backend.calls[0][0] == "analyze"
        assert backend.calls[0][2] == ["FORMS"]

    @pytest.mark.asyncio
    async def test_analyze_failure_falls_back_to_detect_once(self, write_file, make_backend):
        """A backend error in analyze triggers exactly one detect call."""
        backend = make_backend(detect_lines=LINES, analyze_error=OcrBackendError("analyze"))
        path = write_file("doc.pdf", build_pdf_bytes(size=500))

        result = await ExtractionDispatcher(backend).extract(path, "soporte_prueba_saberProtyt")

        assert result.used_analyze is False
        assert [c[0] for c in backend.calls] == ["analyze", "detect"]

    @pytest.mark.asyncio
    async def test_any_analyze_exception_falls_back(self, write_file, make_backend):
        """Errors outside the backend error type still reach detect."""
        backend = make_backend(detect_lines=LINES, analyze_error=TimeoutError("read timed out"))
        path = write_file("doc.pdf", build_pdf_bytes(size=500))

        result = await ExtractionDispatcher(backend).extract(path, "soporte_prueba_saberProtyt")

        assert result.used_analyze is False
        assert [c[0] for c in backend.calls] == ["analyze", "detect"]

    @pytest.mark.asyncio
    async def test_detect_exception_after_fallback_propagates(self, write_file, make_backend):
        """The fallback detect call is not guarded."""
        backend = make_backend(analyze_error=ValueError("bad payload"), detect_error=TimeoutError("read timed out"))
        path = write_file("doc.pdf", build_pdf_bytes(size=500))

        with pytest.raises(TimeoutError):
            await ExtractionDispatcher(backend).extract(path, "soporte_prueba_saberProtyt")

        assert [c[0] for c in backend.calls] == ["analyze", "detect"]

    @pytest.mark.asyncio
    async def test_empty_analyze_falls_back(self, write_file, make_backend):
        """Analyze returning no text also falls back."""
        backend = make_backend(detect_lines=LINES, analyze_lines=[])
        path = write_file("doc.pdf", build_pdf_bytes(size=500))

        result = await ExtractionDispatcher(backend).extract(path, "soporte_prueba_saberProtyt")

        assert result.text == "REPUBLICA DE COLOMBIA DIPLOMA"

    @pytest.mark.asyncio
    async def test_detect_failure_surfaces(self, write_file, make_backend):
        """Detect errors are not retried by the dispatcher."""
        backend = make_backend(detect_error=OcrBackendError("detect", "timeout"))
        path = write_file("doc.pdf", build_pdf_bytes(size=500))

        with pytest.raises(OcrBackendError) as exc_info:
            await ExtractionDispatcher(backend).extract(path, None)

        assert exc_info.value.error_code == "OCR_TIMEOUT"
        assert len(backend.calls) == 1

    @pytest.mark.asyncio
    async def test_no_text_anywhere(self, write_file, make_backend):
        """Empty analyze and empty detect end in NoTextExtracted."""
        backend = make_backend()
        path = write_file("doc.pdf", build_pdf_bytes(size=500))

        with pytest.raises(NoTextExtracted):
            await ExtractionDispatcher(backend).extract(path, "soporte_prueba_saberProtyt")

    @pytest.mark.asyncio
    async def test_extended_backend_above_sync_ceiling(self, write_file, make_backend):
        """Analyze payloads above the sync ceiling use the extended client."""
        standard = make_backend(analyze_lines=LINES)
        extended = make_backend(analyze_lines=LINES)
        dispatcher = ExtractionDispatcher(standard, extended, size_limits=SMALL_LIMITS, analyze_min_bytes=500)

        small = write_file("small.pdf", build_pdf_bytes(size=800))
        large = write_file("large.pdf", build_pdf_bytes(size=1001))
        await dispatcher.extract(small, None)
        await dispatcher.extract(large, None)

        assert [c[1] for c in standard.calls] == [800]
        assert [c[1] for c in extended.calls] == [1001]

    @pytest.mark.asyncio
    async def test_revalidates_final_artifact(self, write_file, make_backend):
        """Invalid bytes never reach the backend."""
        backend = make_backend(detect_lines=LINES)
        path = write_file("doc.bin", b"PK\x03\x04" + b"\x00" * 500)

        with pytest.raises(UnsupportedFileType):
            await ExtractionDispatcher(backend).extract(path, None)

        assert backend.calls == []
