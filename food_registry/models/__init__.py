"""Data models module."""

from food_registry.models.product import ProductRecord
from food_registry.models.audit_event import (
    IntegrityReport,
    ProductRegistered,
    compute_entry_hash,
)

__all__ = [
    "ProductRecord",
    "ProductRegistered",
    "IntegrityReport",
    "compute_entry_hash",
]
