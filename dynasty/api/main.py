"""FastAPI application for the Dynasty personality engine."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import uvicorn
from fastapi import FastAPI

from dynasty import __version__
from dynasty.api.routers import contracts_router, personality_router
from dynasty.core.personality import get_reference_data

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    # Startup
    reference = get_reference_data()
    logger.info(
        f"Dynasty API starting up with {len(reference.archetypes)} archetypes "
        f"(table v{reference.version}, source {reference.source})"
    )
    yield
    logger.info("Dynasty API shutting down...")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Dynasty API",
        description="Player personality and contract negotiation engine",
        version=__version__,
        lifespan=lifespan,
    )

    app.include_router(personality_router, prefix="/api/v1")
    app.include_router(contracts_router, prefix="/api/v1")

    @app.get("/")
    async def root() -> dict:
        """Root endpoint - API info."""
        return {
            "name": "Dynasty API",
            "version": __version__,
            "description": "Player personality and contract negotiation engine",
            "docs": "/docs",
        }

    @app.get("/health")
    async def health() -> dict:
        """Health check endpoint."""
        reference = get_reference_data()
        return {
            "status": "healthy",
            "archetypes": len(reference.archetypes),
            "reference_source": reference.source,
        }

    return app


# Create app instance
app = create_app()


def run_api(host: str = "127.0.0.1", port: int = 8000, reload: bool = False) -> None:
    """Run the API server."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        "dynasty.api.main:app",
        host=host,
        port=port,
        reload=reload,
    )


if __name__ == "__main__":
    run_api(reload=True)
