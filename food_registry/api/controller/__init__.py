"""HTTP controllers."""

from food_registry.api.controller.registry_controller import (
    audit_router,
    products_router,
)

__all__ = ["audit_router", "products_router"]
