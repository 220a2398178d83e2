"""Tests for ReportAggregator."""

from datetime import timedelta
from decimal import Decimal

import pytest

from inventory_ledger.core.entities import ReportPeriod, StockSnapshot
from inventory_ledger.core.services import (
    ReportAggregator,
    percent_change,
    period_cutoff,
    turnover_rate,
)


def snapshot(material_id: str, total_in: str, total_out: str, minimum: str = "0", **kw) -> StockSnapshot:
    total_inflow = Decimal(total_in)
    total_outflow = Decimal(total_out)
    return StockSnapshot(
        material_id=material_id,
        material_name=kw.pop("name", material_id),
        total_inflow=total_inflow,
        total_outflow=total_outflow,
        current_stock=total_inflow - total_outflow,
        min_stock_level=Decimal(minimum),
        **kw,
    )


@pytest.fixture
def aggregator():
    return ReportAggregator()


class TestHelpers:
    def test_percent_change(self):
        assert percent_change(15, 10) == 50.0
        assert percent_change(5, 10) == -50.0
        assert percent_change(3, 0) == 100.0
        assert percent_change(0, 0) == 0.0

    def test_turnover_rate(self):
        assert turnover_rate(Decimal("80"), Decimal("40")) == Decimal("2")
        assert turnover_rate(Decimal("80"), Decimal("0")) == Decimal("80")
        assert turnover_rate(Decimal("80"), Decimal("0.5")) == Decimal("80")

    def test_period_cutoff(self, now):
        assert period_cutoff(ReportPeriod.WEEK, now) == now - timedelta(days=7)
        assert period_cutoff(ReportPeriod.ALL, now) is None


class TestWeekday:
    def test_monday_and_wednesday_buckets(self, aggregator, inflow_factory, outflow_factory, now):
        monday = now
        wednesday = now + timedelta(days=2)
        events = [
            inflow_factory(delivery_date=monday),
            inflow_factory(delivery_date=monday),
            inflow_factory(delivery_date=monday),
            outflow_factory(release_date=wednesday),
        ]

        rows = aggregator.by_weekday(events)

        assert [r.day for r in rows][0] == "Monday"
        assert len(rows) == 7
        assert (rows[0].activities, rows[0].inflows, rows[0].outflows) == (3, 3, 0)
        assert (rows[2].activities, rows[2].inflows, rows[2].outflows) == (1, 0, 1)
        for i in (1, 3, 4, 5, 6):
            assert rows[i].activities == 0
        assert rows[0].percentage == 100.0

    def test_empty_has_zero_percentages(self, aggregator):
        rows = aggregator.by_weekday([])
        assert all(r.percentage == 0.0 for r in rows)


class TestTurnover:
    def test_rates_and_order(self, aggregator):
        rows = aggregator.turnover(
            [
                snapshot("A", "120", "80"),
                snapshot("B", "80", "80"),
                snapshot("C", "10", "0"),
            ]
        )
        assert [r.material_id for r in rows] == ["B", "A", "C"]
        assert rows[0].turnover_rate == Decimal("80")
        assert rows[1].turnover_rate == Decimal("2")
        assert rows[1].velocity == Decimal("200")

    def test_limit(self, aggregator):
        rows = aggregator.turnover([snapshot(str(i), "10", "5") for i in range(5)], limit=2)
        assert len(rows) == 2


class TestTrends:
    def test_windows(self, aggregator, inflow_factory, outflow_factory, now):
        events = [
            inflow_factory(delivery_date=now - timedelta(days=1)),
            inflow_factory(delivery_date=now - timedelta(days=2)),
            inflow_factory(delivery_date=now - timedelta(days=3)),
            inflow_factory(delivery_date=now - timedelta(days=9)),
            inflow_factory(delivery_date=now - timedelta(days=10)),
            outflow_factory(release_date=now - timedelta(days=1)),
            outflow_factory(release_date=now - timedelta(days=30)),
        ]

        report = aggregator.trends(events, now, window_days=7)

        assert report.current_inflows == 3
        assert report.previous_inflows == 2
        assert report.inflow_trend == 50.0
        assert report.current_outflows == 1
        assert report.previous_outflows == 0
        assert report.outflow_trend == 100.0
        assert report.total_activity == 4
        assert report.model_dump()["total_activity"] == 4
        assert report.activity_trend == 100.0

    def test_empty_trends_are_zero(self, aggregator, now):
        report = aggregator.trends([], now)
        assert report.inflow_trend == 0.0
        assert report.activity_trend == 0.0


class TestCriticality:
    def test_ranks_by_activity_times_deficit(self, aggregator, outflow_factory):
        alerts = [
            snapshot("A", "15", "10", minimum="20", name="A"),
            snapshot("B", "10", "10", minimum="20", name="B"),
            snapshot("C", "18", "0", minimum="20", name="C"),
        ]
        recent = [
            outflow_factory(material_id="A"),
            outflow_factory(material_id="A"),
            outflow_factory(material_id="B"),
        ]

        rows = aggregator.criticality(alerts, recent, limit=5)

        assert [r.material_id for r in rows] == ["A", "B", "C"]
        assert rows[0].criticality == Decimal("30")
        assert rows[1].criticality == Decimal("20")
        assert rows[2].recent_activity == 0
        assert rows[2].criticality == Decimal("0")

    def test_limit(self, aggregator):
        alerts = [snapshot(str(i), "0", "0", minimum="5") for i in range(8)]
        assert len(aggregator.criticality(alerts, [], limit=5)) == 5


class TestGroupings:
    def test_by_category_keeps_same_named_categories_apart(self, aggregator):
        rows = aggregator.by_category(
            [
                snapshot("A", "30", "0", minimum="10", category_id="C1", category_name="Tools"),
                snapshot("B", "5", "0", minimum="10", category_id="C2", category_name="Tools"),
                snapshot("C", "0", "0", minimum="10", category_id="C2", category_name="Tools"),
            ]
        )
        assert len(rows) == 2
        assert rows[0].category_id == "C1"
        assert rows[0].total_stock == Decimal("30")
        assert rows[1].material_count == 2
        assert rows[1].low_stock == 1
        assert rows[1].out_of_stock == 1

    def test_by_project_includes_idle_projects(self, aggregator, inflow_factory, outflow_factory):
        inflows = [inflow_factory(project_id="P1", quantity=Decimal("10"), unit_price=Decimal("2"))]
        outflows = [
            outflow_factory(project_id="P1", quantity=Decimal("4")),
            outflow_factory(project_id="P1", quantity=Decimal("1")),
        ]

        rows = aggregator.by_project(inflows, outflows, {"P1": "Tower A", "P2": "Depot"})

        assert [r.project_id for r in rows] == ["P1", "P2"]
        assert rows[0].activities == 3
        assert rows[0].inflow_value == Decimal("20.00")
        assert rows[0].outflow_quantity == Decimal("5")
        assert rows[0].last_activity is not None
        assert rows[1].activities == 0
        assert rows[1].last_activity is None

    def test_by_material_top_movers(self, aggregator, inflow_factory, outflow_factory):
        inflows = [inflow_factory(material_id="M1"), inflow_factory(material_id="M2")]
        outflows = [outflow_factory(material_id="M1", quantity=Decimal("30"))]

        rows = aggregator.by_material(inflows, outflows, {"M1": "Cable"}, limit=1)

        assert len(rows) == 1
        assert rows[0].material_id == "M1"
        assert rows[0].material_name == "Cable"
        assert rows[0].activities == 2
        assert rows[0].net_quantity == Decimal("70")
        assert rows[0].model_dump(mode="json")["net_quantity"] == "70.00"

    def test_filter_by_period(self, aggregator, inflow_factory, now):
        events = [
            inflow_factory(delivery_date=now - timedelta(days=3)),
            inflow_factory(delivery_date=now - timedelta(days=40)),
        ]
        assert len(aggregator.filter_by_period(events, ReportPeriod.WEEK, now)) == 1
        assert len(aggregator.filter_by_period(events, ReportPeriod.ALL, now)) == 2

    def test_summary(self, aggregator, inflow_factory, outflow_factory):
        summary = aggregator.summary(
            [inflow_factory(quantity=Decimal("4"), unit_price=Decimal("5"))],
            [outflow_factory(quantity=Decimal("2"), unit_price=None)],
        )
        assert summary.inflows == 1
        assert summary.outflows == 1
        assert summary.total_value == Decimal("20.00")
        assert summary.model_dump()["total_value"] == Decimal("20.00")
        assert summary.outflow_quantity == Decimal("2")
