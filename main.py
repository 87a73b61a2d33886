"""FastAPI application entry point."""

from dotenv import load_dotenv

load_dotenv()

import logging

from api.routes import extract, health
from core.error_handlers import (
    handle_app_error,
    handle_http_error,
    handle_unknown_error,
    handle_validation_error,
)
from core.lifespan import lifespan
from core.middleware import trace_id_middleware
from core.settings import app_settings
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from ocr_pipeline.core.logging_config import configure_structured_logging
from ocr_pipeline.errors.exceptions import BaseError
from starlette.exceptions import HTTPException as StarletteHTTPException

# Configure logging
configure_structured_logging(level=app_settings.LOG_LEVEL, json_format=app_settings.LOG_JSON)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="OCR Pipeline API",
    version="1.0.0",
    description="Adaptive PDF to image conversion and Textract text extraction",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# 1. Register Middleware
app.middleware("http")(trace_id_middleware)

# 2. Register Exception Handlers
app.add_exception_handler(RequestValidationError, handle_validation_error)
app.add_exception_handler(StarletteHTTPException, handle_http_error)
app.add_exception_handler(BaseError, handle_app_error)
app.add_exception_handler(Exception, handle_unknown_error)

# Routes
app.include_router(health.router)
app.include_router(extract.router)
