"""
FastAPI application for Cafe POS.

Builds the app, registers the routers under /api/v1 and at the root, and
wires CORS and rate limiting. Run with the ``cafe-pos`` console script or
``uvicorn cafe_pos.main:app``.
"""

import logging
import os

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from .config import CORS_ORIGINS
from .logging_config import setup_logging
from .routes import bills_router, kot_router, limiter, menu_router, orders_router

# Configure logging at module load time
setup_logging()

logger = logging.getLogger(__name__)

ROUTERS = (menu_router, kot_router, orders_router, bills_router)


def create_app() -> FastAPI:
    """
    Create the FastAPI application.

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title="Cafe POS API",
        description="Order fulfillment for a cafe point of sale: cart, KOT routing, billing, receipts",
        version="1.0.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Configure rate limiting
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Include routers with API version prefix
    api_v1 = APIRouter(prefix="/api/v1")
    for router in ROUTERS:
        api_v1.include_router(router)
    app.include_router(api_v1)

    # Also mount at root
    for router in ROUTERS:
        app.include_router(router)

    @app.get("/health")
    def health_check():
        return {"status": "healthy"}

    logger.info("Application created with %d routers", len(ROUTERS))
    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))
    logger.info("Starting Cafe POS on %s:%d", host, port)
    uvicorn.run(app, host=host, port=port)
