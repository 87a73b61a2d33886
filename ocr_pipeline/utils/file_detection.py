"""
Centralized file type detection using magic bytes.

Every module that needs to know what a document really is imports from
here; file extensions are never trusted.

Magic bytes reference:
- PDF:  %PDF (0x25504446)
- JPEG: 0xFFD8FF
- PNG:  0x89504E47 (89 P N G)
- TIFF: 0x4949 (little-endian) or 0x4D4D (big-endian)
"""

from typing import Final, Literal

FileType = Literal["PDF", "PNG", "JPEG", "TIFF"]

PDF_SIGNATURE: Final = b"%PDF"

MAGIC_BYTES_MAP: Final[dict[bytes, FileType]] = {
    PDF_SIGNATURE: "PDF",
    b"\x89PNG": "PNG",
    b"\xff\xd8\xff": "JPEG",
    b"\x49\x49": "TIFF",
    b"\x4d\x4d": "TIFF",
}

SUPPORTED_FILE_TYPES: Final[frozenset[str]] = frozenset({"PDF", "PNG", "JPEG", "TIFF"})

# Cloud drive links sometimes download the share page instead of the file
HTML_PREFIXES: Final[tuple[str, ...]] = ("<!DOCTYPE", "<html", "<!do")


def detect_file_type_from_bytes(header: bytes) -> FileType | None:
    """
    Detect file type from magic bytes header.

    Args:
        header: First 8+ bytes of file

    Returns:
        File type tag or None if unrecognized

    Example:
        >>> detect_file_type_from_bytes(b'%PDF-1.4')
        'PDF'
    """
    for signature, file_type in MAGIC_BYTES_MAP.items():
        if header.startswith(signature):
            return file_type
    return None


def looks_like_html(header: bytes) -> bool:
    text = header[:20].decode("utf-8", errors="ignore")
    return text.startswith(HTML_PREFIXES)


def is_pdf_bytes(header: bytes) -> bool:
    return header.startswith(PDF_SIGNATURE)


def is_pdf_file(file_path) -> bool:
    """
    Check the PDF signature on disk.

    Returns False on any read error.
    """
    try:
        with open(file_path, "rb") as f:
            header = f.read(len(PDF_SIGNATURE))
        return is_pdf_bytes(header)
    except OSError:
        return False
