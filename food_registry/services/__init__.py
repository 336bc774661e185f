"""Registry services."""

from food_registry.services.product_registry import (
    AlreadyRegisteredError,
    ProductNotFoundError,
    ProductRegistry,
    RegistryError,
)

__all__ = [
    "AlreadyRegisteredError",
    "ProductNotFoundError",
    "ProductRegistry",
    "RegistryError",
]
