"""FastAPI application entry point."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.routes import admin, health, territories
from .config import settings
from .observability import install_log_capture, remove_log_capture


@asynccontextmanager
async def lifespan(app: FastAPI):
    buffer = install_log_capture(settings.log_buffer_size)
    app.state.log_buffer = buffer
    try:
        yield
    finally:
        app.state.log_buffer = None
        remove_log_capture(buffer)


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.app_name,
        lifespan=lifespan,
    )
    if settings.frontend_allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(settings.frontend_allowed_origins),
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.get("/")
    def root():
        return {
            "service": settings.app_name,
            "status": "running",
            "api_prefix": settings.api_prefix,
            "osrm": settings.osrm_base_url,
            "health": f"{settings.api_prefix}/health",
            "logs": f"{settings.api_prefix}/health/logs",
        }

    app.include_router(health.router, prefix=settings.api_prefix)
    app.include_router(territories.router, prefix=settings.api_prefix)
    app.include_router(admin.router, prefix=settings.api_prefix)
    return app


app = create_app()
