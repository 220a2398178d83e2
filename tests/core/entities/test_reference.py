"""Tests for reference entities and value helpers."""

from datetime import UTC, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from inventory_ledger.core.entities import Material, ReferenceKind, ReportPeriod, StockTotals
from inventory_ledger.core.entities.common import to_db_timestamp, to_decimal


class TestToDecimal:
    def test_rounds_half_up(self):
        assert to_decimal("2.005") == Decimal("2.01")

    def test_integer(self):
        assert to_decimal(7) == Decimal("7.00")

    def test_garbage_raises_value_error(self):
        with pytest.raises(ValueError):
            to_decimal("abc")

    def test_infinity_raises_value_error(self):
        with pytest.raises(ValueError):
            to_decimal(Decimal("Infinity"))


class TestTimestamps:
    def test_stored_in_utc(self):
        dt = datetime(2024, 5, 1, 10, 30, tzinfo=timezone(timedelta(hours=2)))
        stored = to_db_timestamp(dt)
        assert stored == "2024-05-01T08:30:00.000000+00:00"
        assert datetime.fromisoformat(stored) == dt

    def test_fixed_width_orders_lexically(self):
        early = to_db_timestamp(datetime(2024, 1, 1, tzinfo=UTC))
        late = to_db_timestamp(datetime(2024, 1, 1, 0, 0, 0, 1, tzinfo=UTC))
        assert len(early) == len(late)
        assert early < late

    def test_none_passes_through(self):
        assert to_db_timestamp(None) is None


class TestMaterial:
    def test_min_stock_level_defaults_to_zero(self):
        material = Material(name="Sand", category_id="CAT-1", min_stock_level=None)
        assert material.min_stock_level == Decimal("0")

    def test_min_stock_level_quantized(self):
        material = Material(name="Sand", category_id="CAT-1", min_stock_level="12.5")
        assert material.min_stock_level == Decimal("12.50")


class TestEnums:
    def test_reference_tables(self):
        assert ReferenceKind.CATEGORY.table == "categories"
        assert ReferenceKind.MATERIAL.table == "materials"

    def test_period_days(self):
        assert ReportPeriod.WEEK.days == 7
        assert ReportPeriod.QUARTER.days == 90
        assert ReportPeriod.ALL.days is None


class TestStockTotals:
    def test_current_stock(self):
        totals = StockTotals(total_inflow=Decimal("175"), total_outflow=Decimal("50"))
        assert totals.current_stock == Decimal("125")
