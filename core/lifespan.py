import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from ocr_pipeline.clients.textract_client import create_extended_client, create_standard_client
from ocr_pipeline.orchestrator import create_runner
from ocr_pipeline.processors.capabilities import build_registry

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup/shutdown tasks."""

    logger.info("Probing conversion capabilities...")
    registry = build_registry()
    app.state.registry = registry
    logger.info("Conversion chain ready: %s", registry.chain.strategy_names)

    logger.info("Initializing Textract clients...")
    try:
        runner = create_runner(
            create_standard_client(),
            create_extended_client(),
            registry=registry,
        )
        app.state.runner = runner
        logger.info("Textract clients ready")
    except Exception as e:
        logger.error("Textract client initialization failed: %s", e, exc_info=True)
        logger.warning("Application will continue without OCR backend")
        app.state.runner = None

    yield

    logger.info("Shutting down")
