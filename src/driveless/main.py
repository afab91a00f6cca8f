"""FastAPI application entry point."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.routes import admin, health, history
from .config import Settings, settings as default_settings
from .persistence import PersistentRecordStore, create_store
from .services.auth import load_admin_state


def _setup_logging(level: str) -> None:
    root = logging.getLogger()
    if root.handlers:
        return
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def create_app(config: Settings | None = None, store: PersistentRecordStore | None = None) -> FastAPI:
    config = config or default_settings
    _setup_logging(config.log_level)

    app = FastAPI(title=config.app_name)
    app.state.settings = config
    app.state.store = store if store is not None else create_store(config)
    app.state.admin_state = load_admin_state(app.state.store, config)

    if config.frontend_allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(config.frontend_allowed_origins),
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.get("/")
    def root():
        return {
            "service": config.app_name,
            "status": "running",
            "api_prefix": config.api_prefix,
            "health": f"{config.api_prefix}/health",
            "docs": "/docs",
        }

    app.include_router(health.router, prefix=config.api_prefix)
    app.include_router(admin.router, prefix=config.api_prefix)
    app.include_router(history.router, prefix=config.api_prefix)
    return app
