"""
FastAPI Application Entry Point for ChipSim.

This module creates and configures the FastAPI application with:
- HTTP routes for reading and changing the table
- A persistence store loaded at startup and saved after every transition
- CORS middleware for browser front-ends
"""

from typing import Optional
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from chipsim import __version__
from chipsim.config import Config, get_config
from chipsim.core.game import PokerEngine
from chipsim.server.routes import router
from chipsim.storage import BaseStore, JsonFileStore, load_engine


logger = logging.getLogger(__name__)


def create_app(store: Optional[BaseStore] = None, config: Optional[Config] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        store: Persistence store (a JSON file store from config by default)
        config: Application config (loaded from chipsim.toml by default)

    Returns:
        Configured FastAPI application instance
    """
    config = config or get_config()

    logging.basicConfig(
        level=config.server.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    if store is None and config.storage.enabled:
        store = JsonFileStore(config.storage.directory)
        logger.info(f"Saving table state to {store.directory}")

    app = FastAPI(
        title="ChipSim",
        description="Chip tracker for Texas Hold'em played with physical cards",
        version=__version__,
    )

    # CORS middleware for browser front-ends
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router)

    app.state.engine = load_engine(store) if store is not None else PokerEngine()
    app.state.config = config

    logger.info("ChipSim server ready")
    return app


def main():
    """Run the server (for use as entry point)."""
    import uvicorn
    config = get_config()
    uvicorn.run(
        "chipsim.server.app:create_app",
        factory=True,
        host=config.server.host,
        port=config.server.port,
    )


if __name__ == "__main__":
    main()
