"""Tamper-evident registry of authentic food products."""

from food_registry.models import ProductRecord, ProductRegistered, IntegrityReport
from food_registry.services import (
    AlreadyRegisteredError,
    ProductNotFoundError,
    ProductRegistry,
    RegistryError,
)

__all__ = [
    "AlreadyRegisteredError",
    "IntegrityReport",
    "ProductNotFoundError",
    "ProductRecord",
    "ProductRegistered",
    "ProductRegistry",
    "RegistryError",
]
