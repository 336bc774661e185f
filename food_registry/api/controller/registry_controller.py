"""HTTP controller for product registration and verification."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request
from pydantic import BaseModel, Field

from food_registry.models import IntegrityReport, ProductRecord, ProductRegistered
from food_registry.services import ProductRegistry

logger = logging.getLogger(__name__)

products_router = APIRouter(prefix="/products", tags=["products"])
audit_router = APIRouter(prefix="/audit", tags=["audit"])


class RegisterProductRequest(BaseModel):
    """Registration payload sent by manufacturer tooling."""

    product_id: str = Field(min_length=1)
    product_name: str
    ingredients: str
    manufacturer: str
    manufacturing_date: int


class ProductResponse(BaseModel):
    """Stored product record."""

    product_id: str
    product_name: str
    ingredients: str
    manufacturer: str
    manufacturing_date: int

    @classmethod
    def from_record(cls, record: ProductRecord) -> "ProductResponse":
        return cls(
            product_id=record.product_id,
            product_name=record.product_name,
            ingredients=record.ingredients,
            manufacturer=record.manufacturer,
            manufacturing_date=record.manufacturing_date,
        )


class AuthenticityResponse(BaseModel):
    """Result of a lightweight authenticity check."""

    product_id: str
    authentic: bool


class AuditEventResponse(BaseModel):
    """One ProductRegistered audit event."""

    sequence: int
    product_id: str
    product_name: str
    manufacturer: str
    record_hash: str
    recorded_at: str
    previous_hash: str
    entry_hash: str

    @classmethod
    def from_event(cls, event: ProductRegistered) -> "AuditEventResponse":
        return cls(
            sequence=event.sequence,
            product_id=event.product_id,
            product_name=event.product_name,
            manufacturer=event.manufacturer,
            record_hash=event.record_hash,
            recorded_at=event.recorded_at.isoformat(),
            previous_hash=event.previous_hash,
            entry_hash=event.entry_hash,
        )


class IntegrityResponse(BaseModel):
    """Outcome of an audit chain verification."""

    is_valid: bool
    checked_events: int
    error: Optional[str] = None
    head_hash: str = ""

    @classmethod
    def from_report(cls, report: IntegrityReport) -> "IntegrityResponse":
        return cls(
            is_valid=report.is_valid,
            checked_events=report.checked_events,
            error=report.error,
            head_hash=report.head_hash,
        )


def get_registry(request: Request) -> ProductRegistry:
    """Registry instance attached to the running application."""
    return request.app.state.registry


@products_router.post("", status_code=201, response_model=ProductResponse)
def register_product(
    payload: RegisterProductRequest,
    registry: ProductRegistry = Depends(get_registry),
) -> ProductResponse:
    """Register a new product. Responds 409 if the ID is taken."""
    record = registry.register(
        product_id=payload.product_id,
        product_name=payload.product_name,
        ingredients=payload.ingredients,
        manufacturer=payload.manufacturer,
        manufacturing_date=payload.manufacturing_date,
    )
    return ProductResponse.from_record(record)


@products_router.get("/{product_id}", response_model=ProductResponse)
def verify_product(
    product_id: str,
    registry: ProductRegistry = Depends(get_registry),
) -> ProductResponse:
    """Return the registered record. Responds 404 if unknown."""
    return ProductResponse.from_record(registry.verify(product_id))


@products_router.get("/{product_id}/authentic", response_model=AuthenticityResponse)
def check_authentic(
    product_id: str,
    registry: ProductRegistry = Depends(get_registry),
) -> AuthenticityResponse:
    """Cheap existence check for point-of-sale scanning."""
    return AuthenticityResponse(
        product_id=product_id,
        authentic=registry.is_authentic(product_id),
    )


@audit_router.get("/events", response_model=List[AuditEventResponse])
def list_audit_events(
    product_id: Optional[str] = None,
    after_sequence: int = Query(0, ge=0),
    registry: ProductRegistry = Depends(get_registry),
) -> List[AuditEventResponse]:
    """Audit events in sequence order."""
    events = registry.get_events(product_id=product_id, after_sequence=after_sequence)
    return [AuditEventResponse.from_event(event) for event in events]


@audit_router.get("/integrity", response_model=IntegrityResponse)
def check_integrity(
    registry: ProductRegistry = Depends(get_registry),
) -> IntegrityResponse:
    """Verify the audit chain against stored records."""
    return IntegrityResponse.from_report(registry.verify_integrity())
