"""Audit log models.

Each successful registration appends one ProductRegistered event. Events
form a hash chain: every entry hash covers the previous entry's hash, so
rewriting or dropping any stored event breaks the chain from that point on.
"""

import hashlib
import json
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


def compute_entry_hash(
    sequence: int,
    product_id: str,
    product_name: str,
    manufacturer: str,
    record_hash: str,
    recorded_at: datetime,
    previous_hash: str,
) -> str:
    """Deterministic hash of one audit entry."""
    hash_content = json.dumps(
        [
            sequence,
            product_id,
            product_name,
            manufacturer,
            record_hash,
            recorded_at.isoformat(),
            previous_hash,
        ],
        ensure_ascii=False,
    )
    return hashlib.sha256(hash_content.encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class ProductRegistered:
    """Audit event recording a successful product registration."""

    sequence: int  # 1-based, contiguous
    product_id: str
    product_name: str
    manufacturer: str
    record_hash: str  # ProductRecord.content_hash() at registration time
    recorded_at: datetime
    previous_hash: str  # "" for the first event
    entry_hash: str

    @staticmethod
    def create(
        sequence: int,
        product_id: str,
        product_name: str,
        manufacturer: str,
        record_hash: str,
        recorded_at: datetime,
        previous_hash: str,
    ) -> "ProductRegistered":
        """Factory that computes the entry hash."""
        return ProductRegistered(
            sequence=sequence,
            product_id=product_id,
            product_name=product_name,
            manufacturer=manufacturer,
            record_hash=record_hash,
            recorded_at=recorded_at,
            previous_hash=previous_hash,
            entry_hash=compute_entry_hash(
                sequence,
                product_id,
                product_name,
                manufacturer,
                record_hash,
                recorded_at,
                previous_hash,
            ),
        )


@dataclass(frozen=True)
class IntegrityReport:
    """Result of walking the audit chain against the stored records."""

    is_valid: bool
    checked_events: int
    error: Optional[str] = None  # Describes the first inconsistency found
    head_hash: str = ""  # entry_hash of the last event checked, "" when empty
