"""Shared value helpers for ledger entities."""

from datetime import UTC, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

# Quantities and money are fixed at two fractional digits, matching numeric(12, 2)
TWO_PLACES = Decimal("0.01")


def to_decimal(value: Any) -> Decimal:
    """Coerce a number or numeric string to a two-place Decimal.

    Floats go through ``str`` first so 0.1 stays 0.10 rather than the binary
    approximation.
    """
    if isinstance(value, Decimal):
        dec = value
    elif isinstance(value, float):
        dec = Decimal(str(value))
    else:
        try:
            dec = Decimal(value)
        except (InvalidOperation, TypeError) as e:
            raise ValueError(f"not a decimal number: {value!r}") from e
    if not dec.is_finite():
        raise ValueError(f"not a finite number: {value!r}")
    return dec.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def utc(dt: datetime) -> datetime:
    """Return ``dt`` as an aware UTC datetime (naive values are taken as UTC)."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def utcnow() -> datetime:
    return datetime.now(UTC)


def to_db_timestamp(dt: datetime | None) -> str | None:
    """Fixed-width ISO string so lexical order equals time order in SQL."""
    if dt is None:
        return None
    return utc(dt).isoformat(timespec="microseconds")

