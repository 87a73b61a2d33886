# =============================================================================
# Size Limits (bytes)
# =============================================================================

SYNC_BYTES = 5 * 1024 * 1024  # Textract synchronous payload ceiling
ASYNC_BYTES = 500 * 1024 * 1024  # Hard ceiling, anything above is rejected
MIN_SIZE_FOR_CONVERSION = 50 * 1024  # Smaller PDFs are never rasterized
MAX_SIZE_FOR_CONVERSION = 20 * 1024 * 1024  # Larger PDFs are never rasterized
MIN_DOCUMENT_BYTES = 100  # Anything smaller cannot be a real document
ANALYZE_MIN_BYTES = 1024 * 1024  # From here on analyze is used for every type


# =============================================================================
# Conversion Decision
# =============================================================================

QUALITY_THRESHOLD = 15  # Lower score = more likely scanned = convert
HIGH_QUALITY_SCORE = 20  # Informational only, not used by the decision
QUALITY_SAMPLE_BYTES = 10_000

# Document types known to benefit from image conversion
CONVERT_TO_IMAGE_TYPES: frozenset[str] = frozenset(
    {
        "soporte_prueba_saberProtyt",
        "diploma_bachiller",
        "diploma_tecnico",
        "diploma_tecnologo",
        "titulo_profesional",
    }
)

# Document types that always go through analyze
STRUCTURED_DOC_TYPES: frozenset[str] = frozenset({"soporte_prueba_saberProtyt"})


# =============================================================================
# Rasterization / Optimization
# =============================================================================

DEFAULT_CONVERSION_DPI = 300
REDUCED_CONVERSION_DPI = 200
DEFAULT_IMAGE_FORMAT = "png"
OPTIMIZE_MAX_WIDTH = 2000
OPTIMIZE_MAX_HEIGHT = 2800
OPTIMIZE_PNG_COMPRESS_LEVEL = 6
OPTIMIZE_JPEG_QUALITY = 90

CONVERTED_DIR_SUFFIX = "_converted"
OPTIMIZED_SUFFIX = "_optimized"


# =============================================================================
# OCR Backend (Textract)
# =============================================================================

DEFAULT_FEATURE_TYPES: tuple[str, ...] = ("FORMS",)

DOCUMENT_FEATURES: dict[str, tuple[str, ...]] = {
    "cedula": ("FORMS", "SIGNATURES"),
    "diploma_bachiller": ("FORMS", "TABLES"),
    "diploma_tecnico": ("FORMS", "TABLES"),
    "diploma_tecnologo": ("FORMS", "TABLES"),
    "titulo_profesional": ("FORMS", "TABLES"),
    "prueba_tt": ("FORMS", "TABLES", "LAYOUT"),
    "icfes": ("FORMS", "TABLES", "LAYOUT"),
    "recibo_pago": ("FORMS", "TABLES"),
    "encuesta_m0": ("FORMS",),
    "acta_homologacion": ("FORMS", "TABLES"),
    "soporte_prueba_saberProtyt": ("FORMS", "TABLES", "LAYOUT"),
}

OCR_CLIENT_TIMEOUT_SECONDS = 60  # Synchronous analyze/detect
OCR_CLIENT_MAX_RETRIES = 3
OCR_EXTENDED_TIMEOUT_SECONDS = 120  # Payloads above SYNC_BYTES
OCR_EXTENDED_MAX_RETRIES = 5
OCR_CONNECT_TIMEOUT_SECONDS = 10


# =============================================================================
# Reporting
# =============================================================================

EXTRACTION_OK_MIN_CHARS = 100  # Below this the extraction is logged as limited
