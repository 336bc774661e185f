"""Product record model for registry storage."""

import hashlib
import json
from dataclasses import dataclass


@dataclass(frozen=True)
class ProductRecord:
    """Immutable record of one registered food product."""

    product_id: str  # Caller-chosen unique identifier
    product_name: str
    ingredients: str  # Free-text ingredient listing
    manufacturer: str
    manufacturing_date: int  # Caller-supplied timestamp, e.g. 20240601

    def content_hash(self) -> str:
        """SHA-256 over all five fields, used to detect tampering."""
        content = json.dumps(
            [
                self.product_id,
                self.product_name,
                self.ingredients,
                self.manufacturer,
                self.manufacturing_date,
            ],
            ensure_ascii=False,
        )
        return hashlib.sha256(content.encode("utf-8")).hexdigest()
