"""FastAPI application factory"""

import asyncio
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from dealshield.api.dependencies import get_entity_recognizer
from dealshield.api.middleware import RequestIDMiddleware, MetricsMiddleware
from dealshield.api.v1 import analysis
from dealshield.domain.exceptions import EntityRecognitionUnavailable
from dealshield.infrastructure.observability.logging import setup_logging
from dealshield.config import settings

# Setup structured logging
setup_logging(settings.log_level)


async def warm_up_recognizer() -> None:
    """Load the entity model ahead of the first request; rules-only mode if it fails"""
    warm_up = getattr(get_entity_recognizer(), "warm_up", None)
    if warm_up is None:
        return
    try:
        await warm_up()
    except EntityRecognitionUnavailable as e:
        logging.warning(f"Entity recognition warm-up failed, continuing rules-only: {e}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    task = None
    if settings.ner_enabled and settings.ner_warm_up_on_startup:
        task = asyncio.create_task(warm_up_recognizer())
    yield
    if task is not None and not task.done():
        task.cancel()


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="DealShield",
        description="Deal risk analysis, verification plan and safe-reply service",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(analysis.router, prefix="/v1", tags=["analysis"])

    return app


app = create_app()
