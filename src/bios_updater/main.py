"""FastAPI application for the BIOS updater."""

from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import FastAPI

from bios_updater.api.routes import router
from bios_updater.config import load_settings
from bios_updater.services.state_manager import StateManager
from bios_updater.utils.logging import setup_logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup/shutdown hooks.

    Startup:
    - Load settings and initialize logger
    - Create the download directory
    - Initialize StateManager singleton (idle, nothing persisted)

    Shutdown:
    - Log shutdown message
    """
    settings = load_settings()
    logger = setup_logger(
        "bios_updater", settings.log_file, level=settings.log_level_value
    )
    logger.info("BIOS Updater starting up...")

    Path(settings.tmp_dir).mkdir(parents=True, exist_ok=True)
    logger.debug(f"Ensured directory exists: {settings.tmp_dir}")

    StateManager()
    logger.info(f"Catalog: {settings.catalog_url}")
    logger.info(f"BIOS Updater ready on port {settings.port}")

    yield

    logger.info("BIOS Updater shutting down...")


app = FastAPI(
    title="BIOS Updater",
    description="Resolves and applies vendor BIOS updates for the local machine",
    version="1.0.0",
    lifespan=lifespan,
)

app.include_router(router)


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "bios-updater", "version": "1.0.0"}


def main():
    """Main entry point for running the server."""
    settings = load_settings()
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level="info",
        access_log=True,
    )


if __name__ == "__main__":
    main()
