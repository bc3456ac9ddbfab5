"""FastAPI application factory and main entry point."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

from feecache.api.dependencies import cleanup_dependencies, get_fee_provider, get_fee_service
from feecache.api.routes import router
from feecache.config import get_settings

# Configure logging
logging.basicConfig(
    level=get_settings().log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager for startup and shutdown events."""
    settings = get_settings()
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Network: {settings.base_currency_network.value}")
    logger.info(f"Fee provider: {settings.fee_provider}")

    provider = await get_fee_provider(settings)
    fee_service = await get_fee_service(settings, provider)
    await fee_service.start()

    yield

    logger.info(f"Shutting down {settings.app_name}...")
    await cleanup_dependencies()
    logger.info("Cleanup complete")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description=(
            "Network fee cache. Serves the latest fee per byte from a "
            "throttled, periodically refreshed provider and the static "
            "trade fee schedule."
        ),
        version=settings.app_version,
        lifespan=lifespan,
    )

    app.include_router(router)

    @app.get("/api", tags=["root"])
    async def api_info() -> dict[str, str]:
        """API information endpoint."""
        return {
            "name": settings.app_name,
            "version": settings.app_version,
            "docs": "/docs",
            "health": f"{settings.api_prefix}/health",
        }

    return app


# Create application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "feecache.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
