"""Deterministic placeholder records served when no live data exists."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import List

from .models import ProductRecord

SAMPLE_CAPTURED_AT = datetime(1970, 1, 1, tzinfo=timezone.utc)

# (suffix, price, savings, source id)
_SAMPLE_ROWS = (
    ("Sample Product 1", Decimal("2.99"), Decimal("0.50"), "metro"),
    ("Sample Product 2", Decimal("3.49"), Decimal("0.30"), "loblaws"),
    ("Sample Product 3", Decimal("2.79"), Decimal("0.70"), "sobeys"),
)


def generate_sample_records(query: str) -> List[ProductRecord]:
    """Build the sample records for ``query``.

    Only records whose name contains the query (case-insensitive) are
    returned. The output depends on nothing but the query.
    """
    needle = query.lower()
    records = [
        ProductRecord(
            name=f"{query} - {suffix}",
            price=price,
            source_id=source_id,
            captured_at=SAMPLE_CAPTURED_AT,
            original_price=price + savings,
            savings=savings,
        )
        for suffix, price, savings, source_id in _SAMPLE_ROWS
    ]
    return [record for record in records if needle in record.name.lower()]
