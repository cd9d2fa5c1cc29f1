"""
FastAPI application wiring.

This file creates the `FastAPI` instance, builds the field catalog at startup and
configures CORS. Query logic lives in `agrospace.catalog.fields`; HTTP shaping in
`agrospace.api.routes`.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from agrospace.catalog.fields import FieldCatalog
from agrospace.config.settings import get_settings
from agrospace.core.logging import configure_logging

from .routes import router


def create_app(catalog: FieldCatalog | None = None) -> FastAPI:
    """Build the API app; pass `catalog` to serve a pre-built catalog (tests, embedding)."""
    settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if app.state.catalog is None:
            app.state.catalog = FieldCatalog.from_settings(settings)
        # Missing KML documents abort startup.
        app.state.catalog.load()
        yield

    app = FastAPI(title=settings.api.title, version="0.1.0", lifespan=lifespan)
    app.state.catalog = catalog

    cors_origins = list(settings.api.cors_origins)
    cors_origin_regex = settings.api.cors_allow_origin_regex or ""
    if cors_origins or cors_origin_regex:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=cors_origins,
            allow_origin_regex=cors_origin_regex or None,
            allow_credentials=False,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.include_router(router)
    return app


configure_logging()

app = create_app()
