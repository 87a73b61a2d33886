"""Unit tests for the PDF quality heuristic."""

from ocr_pipeline.processors.quality import QualityAssessor

from conftest import NATIVE_TEXT_BODY, SCANNED_BODY, build_pdf_bytes


class TestQualityAssessor:
    """Tests for QualityAssessor.assess."""

    def test_native_text_with_compression(self):
        """Font markers and FlateDecode add up to 40."""
        result = QualityAssessor().assess(build_pdf_bytes(NATIVE_TEXT_BODY))

        assert result.score == 40
        assert result.has_native_text is True
        assert result.is_high_quality is True
        assert result.assessment == "native text"

    def test_image_object_penalty(self):
        """XObject image markers without fonts score -20."""
        result = QualityAssessor().assess(build_pdf_bytes(SCANNED_BODY))

        assert result.score == -20
        assert result.has_image_objects is True
        assert result.image_object_count == 1
        assert result.is_high_quality is False

    def test_many_images_extra_penalty(self):
        """More than two image objects subtract another 15."""
        body = SCANNED_BODY + "/Subtype/Image\n/Subtype/Image\n"
        result = QualityAssessor().assess(build_pdf_bytes(body))

        assert result.image_object_count == 3
        assert result.score == -35

    def test_type1_marker_counts_as_font(self):
        """/Subtype/Type1 alone still earns the text bonus."""
        result = QualityAssessor().assess(build_pdf_bytes("/Subtype/Type1"))

        assert result.score == 30
        assert result.has_native_text is False

    def test_only_first_10000_bytes_inspected(self):
        """Markers past the sample window are ignored."""
        buffer = build_pdf_bytes("", size=10_000) + b"/Type/Font"
        result = QualityAssessor().assess(buffer)

        assert result.score == 0

    def test_deterministic(self):
        """Same buffer, same score."""
        buffer = build_pdf_bytes(NATIVE_TEXT_BODY + SCANNED_BODY)
        assessor = QualityAssessor()

        assert assessor.assess(buffer) == assessor.assess(buffer)

    def test_never_raises_on_bad_input(self):
        """Unreadable input yields a zero score."""
        result = QualityAssessor().assess(None)

        assert result.score == 0
        assert result.assessment == "not assessable"

    def test_empty_buffer(self):
        """Empty buffer scores zero."""
        assert QualityAssessor().assess(b"").score == 0
