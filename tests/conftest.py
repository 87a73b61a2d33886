from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional, Sequence

import pytest

from ocr_pipeline.models.dto import OcrLine

NATIVE_TEXT_BODY = "1 0 obj<</Type/Font/Subtype/Type1/BaseFont/Helvetica>>endobj\n/Filter/FlateDecode\n"
SCANNED_BODY = "2 0 obj<</Type/XObject/Subtype/Image/Width 2480>>endobj\n"


def build_pdf_bytes(body: str = "", size: int = 0) -> bytes:
    """PDF-looking bytes with the given body, padded with spaces up to `size`."""
    data = ("%PDF-1.4\n" + body).encode("latin-1")
    if len(data) < size:
        data += b" " * (size - len(data))
    return data


class FakeOcrBackend:
    """In-memory OCR backend recording every call it receives."""

    def __init__(
        self,
        detect_lines: Optional[Sequence[OcrLine]] = None,
        analyze_lines: Optional[Sequence[OcrLine]] = None,
        detect_error: Optional[Exception] = None,
        analyze_error: Optional[Exception] = None,
    ) -> None:
        self.detect_lines = list(detect_lines or [])
        self.analyze_lines = list(analyze_lines or [])
        self.detect_error = detect_error
        self.analyze_error = analyze_error
        self.calls: list[tuple] = []

    async def detect_text(self, document: bytes) -> list[OcrLine]:
        self.calls.append(("detect", len(document)))
        if self.detect_error:
            raise self.detect_error
        return self.detect_lines

    async def analyze_document(self, document: bytes, feature_types: Sequence[str]) -> list[OcrLine]:
        self.calls.append(("analyze", len(document), list(feature_types)))
        if self.analyze_error:
            raise self.analyze_error
        return self.analyze_lines


@pytest.fixture
def make_backend() -> Callable[..., FakeOcrBackend]:
    return FakeOcrBackend


@pytest.fixture
def pdf_bytes() -> Callable[..., bytes]:
    return build_pdf_bytes


@pytest.fixture
def write_file(tmp_path: Path) -> Callable[[str, bytes], Path]:
    def _write(name: str, content: bytes) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        return path

    return _write


@pytest.fixture
def scanned_pdf_bytes() -> bytes:
    """Scanned-looking PDF inside the conversion window (score -20)."""
    return build_pdf_bytes(SCANNED_BODY, size=60 * 1024)


@pytest.fixture
def native_pdf_bytes() -> bytes:
    """Text PDF inside the conversion window (score 40)."""
    return build_pdf_bytes(NATIVE_TEXT_BODY, size=60 * 1024)


@pytest.fixture
def real_pdf(tmp_path: Path) -> Path:
    """Two-page PDF rendered by PyMuPDF."""
    fitz = pytest.importorskip("fitz")
    path = tmp_path / "scan.pdf"
    doc = fitz.open()
    for number in (1, 2):
        page = doc.new_page(width=200, height=200)
        page.insert_text((20, 50), f"Pagina {number}")
    doc.save(str(path))
    doc.close()
    return path
