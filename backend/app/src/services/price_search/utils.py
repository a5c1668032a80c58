"""Utilities shared by the price search components."""

from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation
from typing import Optional

_NUMBER = r"\d[\d.,]*"
_PRICE_PATTERNS = (
    re.compile(r"\$\s*(" + _NUMBER + ")"),
    re.compile("(" + _NUMBER + r")\s*\$"),
    re.compile("(" + _NUMBER + ")"),
)


def parse_price(price_text: str | None) -> Optional[Decimal]:
    """Best effort conversion from a free-form price label to Decimal.

    The first amount carrying a dollar sign wins, so multi-buy labels such
    as ``"2 / $5.00"`` read as 5.00. Without a dollar sign the first number
    is used. Unit suffixes such as ``"/ each"`` or ``"/ 100g"`` are ignored.
    """
    if not price_text:
        return None

    match = None
    for pattern in _PRICE_PATTERNS:
        match = pattern.search(price_text)
        if match:
            break
    if not match:
        return None

    cleaned = match.group(1).rstrip(".,")
    comma_count = cleaned.count(",")
    dot_count = cleaned.count(".")

    if comma_count and dot_count:
        if cleaned.rfind(",") > cleaned.rfind("."):
            # French-Canadian style: 1 234,56 or 1.234,56
            normalized = cleaned.replace(".", "").replace(",", ".")
        else:
            normalized = cleaned.replace(",", "")
    elif comma_count == 1 and re.fullmatch(r"\d+,\d{2}", cleaned):
        normalized = cleaned.replace(",", ".")
    else:
        normalized = cleaned.replace(",", "")

    try:
        value = Decimal(normalized)
    except (InvalidOperation, ValueError):
        return None
    if not value.is_finite():
        return None
    return value


def normalize_whitespace(value: str) -> str:
    """Collapse repeated spaces and newlines."""
    return re.sub(r"\s+", " ", value).strip()


def normalize_query(raw_query: str | None) -> str:
    """Derive the cache key for a user query: trimmed and lower-cased."""
    if not raw_query:
        return ""
    return normalize_whitespace(raw_query).lower()


def format_cad(value: Decimal | None) -> Optional[str]:
    """Format Decimal values as Canadian dollars."""
    if value is None:
        return None

    quantized = value.quantize(Decimal("0.01"))
    return f"${quantized:,.2f}"
