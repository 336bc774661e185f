"""FastAPI application setup."""

from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from food_registry.api.controller import audit_router, products_router
from food_registry.services import (
    AlreadyRegisteredError,
    ProductNotFoundError,
    ProductRegistry,
)


def create_app(registry: Optional[ProductRegistry] = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        registry: Registry to serve. Defaults to one opened on the
            configured database path.
    """
    app = FastAPI(
        title="Food Product Registry API",
        description="Registration and authenticity verification for food products",
        version="1.0.0",
    )
    app.state.registry = registry if registry is not None else ProductRegistry()

    # Scanning apps call from arbitrary origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    @app.exception_handler(AlreadyRegisteredError)
    async def already_registered_handler(request: Request, exc: AlreadyRegisteredError):
        return JSONResponse(
            status_code=409,
            content={"error": "already_registered", "product_id": exc.product_id, "detail": str(exc)},
        )

    @app.exception_handler(ProductNotFoundError)
    async def not_found_handler(request: Request, exc: ProductNotFoundError):
        return JSONResponse(
            status_code=404,
            content={"error": "not_found", "product_id": exc.product_id, "detail": str(exc)},
        )

    # Include routers
    app.include_router(products_router)
    app.include_router(audit_router)

    @app.get("/health")
    async def health_check() -> dict:
        """Health check endpoint."""
        return {"status": "healthy"}

    return app
