"""Tests for inflow and outflow entities."""

from datetime import UTC, datetime, timedelta
from decimal import Decimal

import pytest
from pydantic import ValidationError

from inventory_ledger.core.entities import EventKind, LedgerEvent, ReturnStatus


class TestLedgerEvent:
    def test_quantity_quantized_to_two_places(self, inflow_factory):
        event = inflow_factory(quantity="12.345")
        assert event.quantity == Decimal("12.35")

    def test_float_quantity_keeps_decimal_value(self, inflow_factory):
        event = inflow_factory(quantity=0.1)
        assert event.quantity == Decimal("0.10")

    def test_zero_quantity_rejected(self, inflow_factory):
        with pytest.raises(ValidationError):
            inflow_factory(quantity=0)

    def test_negative_quantity_rejected(self, outflow_factory):
        with pytest.raises(ValidationError):
            outflow_factory(quantity=Decimal("-5"))

    def test_negative_price_rejected(self, inflow_factory):
        with pytest.raises(ValidationError):
            inflow_factory(unit_price=Decimal("-1"))

    def test_kind_and_date_come_from_the_concrete_event(self, inflow_factory, outflow_factory):
        inflow = inflow_factory()
        outflow = outflow_factory()
        assert (inflow.kind, inflow.event_date) == (EventKind.INFLOW, inflow.delivery_date)
        assert (outflow.kind, outflow.event_date) == (EventKind.OUTFLOW, outflow.release_date)
        assert not hasattr(LedgerEvent, "kind")
        assert not hasattr(LedgerEvent, "event_date")

    def test_total_value_derived_from_price(self, inflow_factory):
        event = inflow_factory(quantity=Decimal("4"), unit_price=Decimal("2.50"))
        assert event.total_value == Decimal("10.00")

    def test_total_value_none_without_price(self, inflow_factory):
        event = inflow_factory(unit_price=None, total_value=Decimal("99"))
        assert event.total_value is None

    def test_supplied_total_value_is_overridden(self, inflow_factory):
        event = inflow_factory(
            quantity=Decimal("3"), unit_price=Decimal("1.00"), total_value=Decimal("50")
        )
        assert event.total_value == Decimal("3.00")

    def test_naive_datetimes_taken_as_utc(self, inflow_factory):
        event = inflow_factory(delivery_date=datetime(2024, 1, 1, 8, 0))
        assert event.delivery_date.tzinfo is not None
        assert event.delivery_date.utcoffset() == timedelta(0)

    def test_kind_and_event_date(self, inflow_factory, outflow_factory, now):
        inflow = inflow_factory()
        outflow = outflow_factory()
        assert inflow.kind == EventKind.INFLOW
        assert outflow.kind == EventKind.OUTFLOW
        assert inflow.event_date == now
        assert outflow.event_date == now

    def test_person(self, inflow_factory, outflow_factory):
        assert inflow_factory(received_by="Ali").person == "Ali"
        assert outflow_factory(authorized_by="Sara").person == "Sara"


class TestEventKind:
    def test_tables(self):
        assert EventKind.INFLOW.table == "inflows"
        assert EventKind.OUTFLOW.table == "outflows"

    def test_date_columns(self):
        assert EventKind.INFLOW.date_column == "delivery_date"
        assert EventKind.OUTFLOW.date_column == "release_date"


class TestReturnStatus:
    def test_released_without_return_date(self, outflow_factory, now):
        assert outflow_factory().return_status(now) == ReturnStatus.RELEASED

    def test_pending_before_return_date(self, outflow_factory, now):
        event = outflow_factory(return_date=now + timedelta(days=3))
        assert event.return_status(now) == ReturnStatus.PENDING_RETURN

    def test_overdue_after_return_date(self, outflow_factory, now):
        event = outflow_factory(return_date=now - timedelta(days=1))
        assert event.return_status(now) == ReturnStatus.OVERDUE_RETURN

    def test_returned_wins_over_overdue(self, outflow_factory, now):
        event = outflow_factory(return_date=now - timedelta(days=1), is_returned=True)
        assert event.return_status(now) == ReturnStatus.RETURNED

    def test_overdue_is_function_of_now(self, outflow_factory):
        due = datetime(2024, 3, 1, tzinfo=UTC)
        event = outflow_factory(return_date=due)
        assert event.return_status(due - timedelta(seconds=1)) == ReturnStatus.PENDING_RETURN
        assert event.return_status(due + timedelta(seconds=1)) == ReturnStatus.OVERDUE_RETURN
