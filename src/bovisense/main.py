"""FastAPI application entry point."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

from fastapi import FastAPI

from bovisense.api.exception_handlers import setup_exception_handlers
from bovisense.api.middleware import CORS_HEADERS, PermissiveCORSMiddleware
from bovisense.api.routes import router
from bovisense.config import get_settings
from bovisense.vision.gateway import GatewayClient

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan: initialize on startup, clean up on shutdown."""
    settings = get_settings()
    app.state.settings = settings

    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)

    logger.info(
        "Starting BoviSense (model=%s, gateway=%s, auth=%s)",
        settings.gateway_model,
        settings.gateway_url,
        "enabled" if settings.api_key else "disabled",
    )
    if not settings.gateway_api_key:
        logger.warning("BOVISENSE_GATEWAY_API_KEY is not set; classification requests will fail")

    gateway = GatewayClient(settings)
    app.state.classifier = gateway

    logger.info("BoviSense ready")
    yield

    logger.info("Shutting down BoviSense")
    await gateway.shutdown()
    logger.info("BoviSense shutdown complete")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    application = FastAPI(
        title="BoviSense",
        description="Cattle vs buffalo image classification through a hosted vision model",
        version="0.1.0",
        lifespan=lifespan,
    )

    application.add_middleware(
        PermissiveCORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["POST", "GET", "OPTIONS"],
        allow_headers=[h.strip() for h in CORS_HEADERS["Access-Control-Allow-Headers"].split(",")],
    )

    setup_exception_handlers(application)
    application.include_router(router)
    return application


app = create_app()
