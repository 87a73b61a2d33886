"""
Document profiles and size limits, built once from the settings constants.

Everything here is read-only after import; per-request state lives in the
pipeline context instead.
"""

from __future__ import annotations

from ocr_pipeline.config.settings import (
    ASYNC_BYTES,
    CONVERT_TO_IMAGE_TYPES,
    DEFAULT_CONVERSION_DPI,
    DEFAULT_FEATURE_TYPES,
    DOCUMENT_FEATURES,
    MAX_SIZE_FOR_CONVERSION,
    MIN_SIZE_FOR_CONVERSION,
    REDUCED_CONVERSION_DPI,
    STRUCTURED_DOC_TYPES,
    SYNC_BYTES,
)
from ocr_pipeline.models.dto import DocumentProfile, SizeLimits

SIZE_LIMITS = SizeLimits(
    sync_bytes=SYNC_BYTES,
    async_bytes=ASYNC_BYTES,
    min_conversion_bytes=MIN_SIZE_FOR_CONVERSION,
    max_conversion_bytes=MAX_SIZE_FOR_CONVERSION,
)


def _conversion_dpi(doc_type: str) -> int:
    # Structured exam supports carry small print and need the full density
    if doc_type in STRUCTURED_DOC_TYPES:
        return DEFAULT_CONVERSION_DPI
    return REDUCED_CONVERSION_DPI


def _build_profiles() -> dict[str, DocumentProfile]:
    doc_types = set(DOCUMENT_FEATURES) | set(CONVERT_TO_IMAGE_TYPES)
    return {
        doc_type: DocumentProfile(
            doc_type=doc_type,
            ocr_features=frozenset(DOCUMENT_FEATURES.get(doc_type, DEFAULT_FEATURE_TYPES)),
            convertible_to_image=doc_type in CONVERT_TO_IMAGE_TYPES,
            conversion_dpi=_conversion_dpi(doc_type),
        )
        for doc_type in sorted(doc_types)
    }


DOCUMENT_PROFILES: dict[str, DocumentProfile] = _build_profiles()


def get_profile(doc_type: str | None) -> DocumentProfile | None:
    if not doc_type:
        return None
    return DOCUMENT_PROFILES.get(doc_type)


def get_feature_types(doc_type: str | None) -> list[str]:
    """Feature tags for the analyze call, `FORMS` for unknown types."""
    profile = get_profile(doc_type)
    if profile is None:
        return list(DEFAULT_FEATURE_TYPES)
    return sorted(profile.ocr_features)
