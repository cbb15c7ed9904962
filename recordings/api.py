"""
FastAPI app entry point aggregating routers under recordings/routes.
Run as `uvicorn recordings.api:app` (or `recordings serve`).
"""
from __future__ import annotations

import logging

from fastapi import FastAPI

from . import __version__
from .db import DBConfig
from .logs import LogContext
from .store import AlbumStore

logger = logging.getLogger(__name__)


def create_app(config: DBConfig | None = None, store: AlbumStore | None = None) -> FastAPI:
    """
    Build the app. A ready ``store`` is used as-is; otherwise one is opened
    from ``config`` (or the resolved configuration) at startup.
    """
    app = FastAPI(title="recordings-api", version=__version__)
    app.state.store = store

    @app.on_event("startup")
    def on_startup():
        if app.state.store is not None:
            return
        log = LogContext("STARTUP")
        try:
            app.state.store = AlbumStore.open(config)
            log.write("OK")
        except Exception as e:
            log.write("ERROR", str(e))
            raise

    @app.on_event("shutdown")
    def on_shutdown():
        if app.state.store is not None:
            app.state.store.close()
            app.state.store = None

    # Include routers
    from .routes import base as base_routes
    from .routes import albums as album_routes

    app.include_router(base_routes.router)
    app.include_router(album_routes.router)
    return app


app = create_app()
