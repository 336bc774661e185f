"""Product registry service.

Single source of truth for product authenticity data:
- Registration (each product ID at most once, records never change)
- Verification (full record lookup) and cheap authenticity checks
- Audit trail (one hash-chained ProductRegistered event per registration)
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from food_registry.clients import SqliteClient
from food_registry.config.configuration import get_config
from food_registry.models import (
    IntegrityReport,
    ProductRecord,
    ProductRegistered,
    compute_entry_hash,
)

logger = logging.getLogger(__name__)

# SQL statements
CREATE_PRODUCTS_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS products (
    product_id TEXT PRIMARY KEY,
    product_name TEXT NOT NULL,
    ingredients TEXT NOT NULL,
    manufacturer TEXT NOT NULL,
    manufacturing_date INTEGER NOT NULL
)
"""

CREATE_EVENTS_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS audit_events (
    sequence INTEGER PRIMARY KEY,
    product_id TEXT NOT NULL UNIQUE REFERENCES products(product_id),
    product_name TEXT NOT NULL,
    manufacturer TEXT NOT NULL,
    record_hash TEXT NOT NULL,
    recorded_at TEXT NOT NULL,
    previous_hash TEXT NOT NULL,
    entry_hash TEXT NOT NULL
)
"""

SELECT_EVENTS_SQL = """SELECT sequence, product_id, product_name, manufacturer,
                              record_hash, recorded_at, previous_hash, entry_hash
                       FROM audit_events"""


class RegistryError(Exception):
    """Base class for registry outcomes reported to callers."""

    def __init__(self, product_id: str, message: str):
        super().__init__(message)
        self.product_id = product_id


class AlreadyRegisteredError(RegistryError):
    """Raised when a product ID has already been registered."""

    def __init__(self, product_id: str):
        super().__init__(product_id, f"Product {product_id!r} is already registered")


class ProductNotFoundError(RegistryError):
    """Raised when no record exists for a product ID."""

    def __init__(self, product_id: str):
        super().__init__(product_id, f"Product {product_id!r} not found")


def _row_to_event(row) -> ProductRegistered:
    return ProductRegistered(
        sequence=row[0],
        product_id=row[1],
        product_name=row[2],
        manufacturer=row[3],
        record_hash=row[4],
        recorded_at=datetime.fromisoformat(row[5]),
        previous_hash=row[6],
        entry_hash=row[7],
    )


class ProductRegistry:
    """Registry mapping product IDs to immutable product records.

    Safe to share between threads. Registration holds the storage
    transaction for the whole existence check, record insert and event
    append, so concurrent registrations of one ID resolve to exactly one
    success.
    """

    def __init__(self, db_path: Optional[str] = None):
        """Initialize the product registry.

        Args:
            db_path: Path to the SQLite database file. Defaults to the
                configured database path.
        """
        if db_path is None:
            db_path = get_config().database.path
        self._db_path = db_path
        self._sqlite_client = SqliteClient(db_path)
        self._ensure_tables_exist()

    def _ensure_tables_exist(self) -> None:
        """Create the registry tables if they don't exist."""
        self._sqlite_client.execute_query(CREATE_PRODUCTS_TABLE_SQL)
        self._sqlite_client.execute_query(CREATE_EVENTS_TABLE_SQL)
        logger.debug(f"Registry tables initialized in {self._db_path}")

    def register(
        self,
        product_id: str,
        product_name: str,
        ingredients: str,
        manufacturer: str,
        manufacturing_date: int,
    ) -> ProductRecord:
        """Register a new product.

        Args:
            product_id: Caller-chosen unique identifier.
            product_name: Descriptive label.
            ingredients: Free-text ingredient listing.
            manufacturer: Free-text attribution.
            manufacturing_date: Caller-supplied timestamp, not validated.

        Returns:
            The stored ProductRecord.

        Raises:
            AlreadyRegisteredError: If product_id is already registered.
                Nothing is written in that case.
        """
        record = ProductRecord(
            product_id=product_id,
            product_name=product_name,
            ingredients=ingredients,
            manufacturer=manufacturer,
            manufacturing_date=manufacturing_date,
        )

        with self._sqlite_client.transaction() as db:
            existing = db.execute_query(
                "SELECT 1 FROM products WHERE product_id = ?",
                (product_id,),
            )
            if existing:
                logger.warning(f"Rejected duplicate registration for product {product_id}")
                raise AlreadyRegisteredError(product_id)

            db.execute_query(
                """INSERT INTO products
                   (product_id, product_name, ingredients, manufacturer, manufacturing_date)
                   VALUES (?, ?, ?, ?, ?)""",
                (
                    record.product_id,
                    record.product_name,
                    record.ingredients,
                    record.manufacturer,
                    record.manufacturing_date,
                ),
            )

            head = db.execute_query(
                "SELECT sequence, entry_hash FROM audit_events ORDER BY sequence DESC LIMIT 1"
            )
            last_sequence, previous_hash = head[0] if head else (0, "")

            event = ProductRegistered.create(
                sequence=last_sequence + 1,
                product_id=record.product_id,
                product_name=record.product_name,
                manufacturer=record.manufacturer,
                record_hash=record.content_hash(),
                recorded_at=datetime.now(timezone.utc),
                previous_hash=previous_hash,
            )
            db.execute_query(
                """INSERT INTO audit_events
                   (sequence, product_id, product_name, manufacturer,
                    record_hash, recorded_at, previous_hash, entry_hash)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?)""",
                (
                    event.sequence,
                    event.product_id,
                    event.product_name,
                    event.manufacturer,
                    event.record_hash,
                    event.recorded_at.isoformat(),
                    event.previous_hash,
                    event.entry_hash,
                ),
            )

        logger.info(
            f"Registered product {product_id} ({product_name}) by {manufacturer} "
            f"at audit sequence {event.sequence}"
        )
        return record

    def verify(self, product_id: str) -> ProductRecord:
        """Look up the stored record for a product.

        Raises:
            ProductNotFoundError: If the product was never registered.
        """
        result = self._sqlite_client.execute_query(
            """SELECT product_id, product_name, ingredients, manufacturer, manufacturing_date
               FROM products WHERE product_id = ?""",
            (product_id,),
        )

        if not result:
            logger.debug(f"Verification failed, unknown product {product_id}")
            raise ProductNotFoundError(product_id)

        row = result[0]
        return ProductRecord(
            product_id=row[0],
            product_name=row[1],
            ingredients=row[2],
            manufacturer=row[3],
            manufacturing_date=row[4],
        )

    def is_authentic(self, product_id: str) -> bool:
        """Return whether a record exists for the product ID."""
        result = self._sqlite_client.execute_query(
            "SELECT 1 FROM products WHERE product_id = ?",
            (product_id,),
        )
        return bool(result)

    def count(self) -> int:
        """Number of registered products."""
        return self._sqlite_client.execute_query("SELECT COUNT(*) FROM products")[0][0]

    def get_events(
        self,
        product_id: Optional[str] = None,
        after_sequence: int = 0,
    ) -> List[ProductRegistered]:
        """Get audit events in sequence order.

        Args:
            product_id: Only return the event for this product.
            after_sequence: Only return events with a higher sequence number.
        """
        query = SELECT_EVENTS_SQL + " WHERE sequence > ?"
        params: list = [after_sequence]
        if product_id is not None:
            query += " AND product_id = ?"
            params.append(product_id)
        query += " ORDER BY sequence"

        rows = self._sqlite_client.execute_query(query, tuple(params))
        return [_row_to_event(row) for row in rows]

    def verify_integrity(self) -> IntegrityReport:
        """Check the audit chain and the stored records against each other.

        Detects rewritten or removed events, records edited after
        registration, and records without a matching event.

        Removing the newest event together with its product leaves a chain
        that is still consistent. Callers that need to detect truncation
        should keep the returned head_hash and compare it on the next check.
        """
        with self._sqlite_client.transaction(immediate=False) as db:
            events = [
                _row_to_event(row)
                for row in db.execute_query(SELECT_EVENTS_SQL + " ORDER BY sequence")
            ]
            records = {
                row[0]: ProductRecord(*row)
                for row in db.execute_query(
                    """SELECT product_id, product_name, ingredients, manufacturer,
                              manufacturing_date FROM products"""
                )
            }

        head_hash = events[-1].entry_hash if events else ""
        error = self._find_inconsistency(events, records)
        if error:
            logger.error(f"Registry integrity check failed: {error}")
            return IntegrityReport(
                is_valid=False,
                checked_events=len(events),
                error=error,
                head_hash=head_hash,
            )

        return IntegrityReport(is_valid=True, checked_events=len(events), head_hash=head_hash)

    @staticmethod
    def _find_inconsistency(
        events: List[ProductRegistered],
        records: dict,
    ) -> Optional[str]:
        expected_previous = ""

        for expected_sequence, event in enumerate(events, start=1):
            if event.sequence != expected_sequence:
                return f"Sequence gap: expected {expected_sequence}, found {event.sequence}"

            if event.previous_hash != expected_previous:
                return f"Hash chain broken at sequence {event.sequence}"

            computed = compute_entry_hash(
                event.sequence,
                event.product_id,
                event.product_name,
                event.manufacturer,
                event.record_hash,
                event.recorded_at,
                event.previous_hash,
            )
            if computed != event.entry_hash:
                return f"Corrupt event at sequence {event.sequence}: hash mismatch"

            record = records.get(event.product_id)
            if record is None:
                return f"Event {event.sequence} refers to missing product {event.product_id}"
            if record.content_hash() != event.record_hash:
                return f"Product {event.product_id} was modified after registration"
            if (event.product_name, event.manufacturer) != (record.product_name, record.manufacturer):
                return f"Event {event.sequence} does not match product {event.product_id}"

            expected_previous = event.entry_hash

        logged_ids = {event.product_id for event in events}
        unlogged = sorted(set(records) - logged_ids)
        if unlogged:
            return f"Product {unlogged[0]} has no registration event"

        return None

    def close(self) -> None:
        """Close the database connection."""
        self._sqlite_client.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit with cleanup."""
        self.close()
        return False
