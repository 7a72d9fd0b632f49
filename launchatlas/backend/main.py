"""LaunchAtlas FastAPI backend entry point."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from launchatlas.backend.routers import orbits, sites
from launchatlas.backend.services.dataset_service import dataset_service
from launchatlas.utils.config import Settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    logger.info("LaunchAtlas API starting up")
    if not dataset_service.is_loaded:
        dataset_service.initialize(dataset_service.settings)

    yield

    logger.info("LaunchAtlas API shutting down")


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or dataset_service.settings
    app = FastAPI(
        title="LaunchAtlas",
        description="Launch site aggregation and orbit geometry for visualization",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(sites.router, prefix="/api/sites", tags=["Sites"])
    app.include_router(orbits.router, prefix="/api/orbits", tags=["Orbits"])

    @app.get("/api/health")
    async def health_check():
        status = {"status": "ok", "service": "LaunchAtlas", "dataset_loaded": dataset_service.is_loaded}
        if dataset_service.is_loaded:
            status.update(dataset_service.get_dataset().summary())
        return status

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("launchatlas.backend.main:app", host="0.0.0.0", port=8000, reload=True)
