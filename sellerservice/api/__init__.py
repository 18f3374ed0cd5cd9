"""SellerService REST API — FastAPI application factory."""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from sellerservice.api.deps import close_price_client, dispose_engine, init_session_factory
from sellerservice.api.errors import register_error_handlers
from sellerservice.api.middleware.request_id import RequestIDMiddleware
from sellerservice.api.routers import companies, services
from sellerservice.core.logging import setup_logging


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: init DB. Shutdown: close the price client, dispose engine."""
    init_session_factory()
    yield
    await close_price_client()
    await dispose_engine()


def create_app() -> FastAPI:
    """Build and return the FastAPI application."""
    setup_logging()

    app = FastAPI(
        title="SellerService",
        docs_url="/api/v1/docs",
        openapi_url="/api/v1/openapi.json",
        lifespan=_lifespan,
    )

    register_error_handlers(app)

    cors_origins = os.environ.get("SELLERSERVICE_CORS_ORIGINS", "http://localhost:3000")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in cors_origins.split(",")],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health", tags=["ops"])
    async def health() -> JSONResponse:
        return JSONResponse({"status": "ok"})

    app.include_router(companies.router, prefix="/api/v1/companies", tags=["companies"])
    app.include_router(
        services.router,
        prefix="/api/v1/companies/{company_id}/services",
        tags=["services"],
    )

    return app
