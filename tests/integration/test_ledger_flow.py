"""Integration tests for the full ledger flow against a migrated SQLite database."""

from datetime import timedelta
from decimal import Decimal

import pytest

from inventory_ledger.application.dto.requests import (
    RecordInflowRequest,
    RecordOutflowRequest,
    ReportRequest,
    UpdateMaterialRequest,
)
from inventory_ledger.application.use_cases import (
    DeactivateReferenceUseCase,
    DeleteEventUseCase,
    GetActivityFeedUseCase,
    GetAnalyticsUseCase,
    GetDashboardUseCase,
    GetEventUseCase,
    GetLowStockAlertsUseCase,
    GetReportUseCase,
    GetStockSnapshotUseCase,
    ListOverdueReturnsUseCase,
    MarkReturnedUseCase,
    RecordInflowUseCase,
    RecordOutflowUseCase,
    UpdateEventUseCase,
    UpdateReferenceUseCase,
)
from inventory_ledger.core.entities import (
    ActorContext,
    EventKind,
    Material,
    ReferenceKind,
    ReportDimension,
    ReportPeriod,
    ReturnStatus,
    StockStatus,
    Unit,
)
from inventory_ledger.core.exceptions import (
    DuplicateNameError,
    InsufficientStockError,
    MaterialNotFoundError,
    ReferentialIntegrityError,
    ValidationError,
)
from inventory_ledger.infrastructure.storage.sqlite import SQLiteUnitOfWork
from inventory_ledger.infrastructure.storage.sqlite.reference_store import SQLiteReferenceStore


@pytest.fixture
def uow(ledger_db):
    return SQLiteUnitOfWork()


@pytest.fixture
def receive(uow, seeded, actor, now):
    """Record an inflow of ``quantity`` meters, ``days_ago`` before now."""

    async def record(quantity: str, days_ago: int = 0, **overrides):
        request = RecordInflowRequest(
            **{
                "material_id": seeded.material.id,
                "unit_id": seeded.unit.id,
                "project_id": seeded.project.id,
                "quantity": Decimal(quantity),
                "unit_price": Decimal("2"),
                "delivery_date": now - timedelta(days=days_ago),
                "received_by": "Ali",
                "supplier_name": "Cables Co",
                "purpose": "Replenishment",
                **overrides,
            }
        )
        return await RecordInflowUseCase(unit_of_work=uow).execute(request, actor)

    return record


@pytest.fixture
def release(uow, seeded, actor, now):
    """Record an outflow of ``quantity`` meters, ``days_ago`` before now."""

    async def record(quantity: str, days_ago: int = 0, **overrides):
        request = RecordOutflowRequest(
            **{
                "material_id": seeded.material.id,
                "unit_id": seeded.unit.id,
                "project_id": seeded.project.id,
                "quantity": Decimal(quantity),
                "release_date": now - timedelta(days=days_ago),
                "authorized_by": "Sara",
                "received_by": "Site crew",
                "purpose": "Floor 3 wiring",
                **overrides,
            }
        )
        return await RecordOutflowUseCase(unit_of_work=uow).execute(request, actor)

    return record


async def stock_of(uow, material_id, unit_id=None):
    actor = ActorContext(user_id="auditor")
    return await GetStockSnapshotUseCase(unit_of_work=uow).execute(
        actor, material_id=material_id, unit_id=unit_id
    )


class TestStockFlow:
    async def test_stock_is_inflows_minus_outflows(self, uow, seeded, receive, release):
        for qty in ("100", "50", "25"):
            await receive(qty)
        for qty in ("40", "10"):
            await release(qty)

        snapshot = await stock_of(uow, seeded.material.id)

        assert snapshot.total_inflow == Decimal("175")
        assert snapshot.total_outflow == Decimal("50")
        assert snapshot.current_stock == Decimal("125")
        assert snapshot.status == StockStatus.IN_STOCK

    async def test_repeated_snapshot_reads_are_identical(
        self, uow, seeded, receive, release, actor
    ):
        await receive("100")
        await release("30")
        stock = GetStockSnapshotUseCase(unit_of_work=uow)

        first = await stock.execute(actor, material_id=seeded.material.id)
        second = await stock.execute(actor, material_id=seeded.material.id)
        assert first == second

        everything = await stock.execute(actor)
        assert everything == await stock.execute(actor)
        assert [s.current_stock for s in everything] == [Decimal("70")]

    async def test_overdraw_rejected_with_numbers(self, uow, seeded, receive, release):
        await receive("175")
        await release("50")

        with pytest.raises(InsufficientStockError) as exc_info:
            await release("200")

        assert exc_info.value.available == Decimal("125")
        assert exc_info.value.requested == Decimal("200.00")
        assert (await stock_of(uow, seeded.material.id)).current_stock == Decimal("125")

    async def test_units_are_separate_ledgers(self, uow, seeded, receive, release):
        await receive("100")
        await receive("3", unit_id=seeded.box.id)

        with pytest.raises(InsufficientStockError) as exc_info:
            await release("5", unit_id=seeded.box.id)
        assert exc_info.value.available == Decimal("3")

        boxes = await stock_of(uow, seeded.material.id, seeded.box.id)
        assert boxes.current_stock == Decimal("3")

    async def test_low_and_out_of_stock_classification(self, uow, seeded, receive, release, actor):
        alerts = await GetLowStockAlertsUseCase(unit_of_work=uow).execute(actor)
        assert alerts[0].status == StockStatus.OUT_OF_STOCK

        await receive("15")
        alerts = await GetLowStockAlertsUseCase(unit_of_work=uow).execute(actor)
        assert alerts[0].status == StockStatus.LOW_STOCK

        await receive("35")
        assert await GetLowStockAlertsUseCase(unit_of_work=uow).execute(actor) == []

    async def test_deactivated_material_rejects_events(self, uow, seeded, receive, actor):
        await DeactivateReferenceUseCase(unit_of_work=uow).execute(
            ReferenceKind.MATERIAL, seeded.material.id, actor
        )
        with pytest.raises(MaterialNotFoundError):
            await receive("10")


class TestEditFlow:
    async def test_outflow_increase_is_reauthorized(self, uow, seeded, receive, release, actor):
        await receive("100")
        outflow = await release("40")
        use_case = UpdateEventUseCase(unit_of_work=uow)

        updated = await use_case.execute(
            EventKind.OUTFLOW, outflow.id, {"quantity": Decimal("100")}, actor
        )
        assert updated.quantity == Decimal("100.00")

        with pytest.raises(InsufficientStockError):
            await use_case.execute(
                EventKind.OUTFLOW, outflow.id, {"quantity": Decimal("101")}, actor
            )
        assert (await stock_of(uow, seeded.material.id)).current_stock == Decimal("0")

    async def test_inflow_cannot_drop_below_outflows(self, uow, seeded, receive, release, actor):
        inflow = await receive("100")
        await release("60")

        with pytest.raises(InsufficientStockError):
            await UpdateEventUseCase(unit_of_work=uow).execute(
                EventKind.INFLOW, inflow.id, {"quantity": Decimal("50")}, actor
            )
        with pytest.raises(InsufficientStockError):
            await DeleteEventUseCase(unit_of_work=uow).execute(EventKind.INFLOW, inflow.id, actor)

        updated = await UpdateEventUseCase(unit_of_work=uow).execute(
            EventKind.INFLOW, inflow.id, {"quantity": Decimal("60")}, actor
        )
        assert updated.total_value == Decimal("120.00")

    async def test_delete_outflow_restores_stock(self, uow, seeded, receive, release, actor):
        await receive("100")
        outflow = await release("30")

        await DeleteEventUseCase(unit_of_work=uow).execute(EventKind.OUTFLOW, outflow.id, actor)

        assert (await stock_of(uow, seeded.material.id)).current_stock == Decimal("100")


class TestReturnsFlow:
    async def test_overdue_then_returned(self, uow, receive, release, actor, now):
        await receive("100")
        borrowed = await release("5", days_ago=10, return_date=now - timedelta(days=2))
        await release("5", return_date=now + timedelta(days=2))

        overdue = await ListOverdueReturnsUseCase(unit_of_work=uow).execute(actor, now=now)
        assert [o.id for o in overdue] == [borrowed.id]

        returned = await MarkReturnedUseCase(unit_of_work=uow).execute(borrowed.id, actor)
        assert returned.is_returned is True
        assert await ListOverdueReturnsUseCase(unit_of_work=uow).execute(actor, now=now) == []

    async def test_release_without_return_date_stays_released(
        self, uow, receive, release, actor, now
    ):
        await receive("10")
        released = await release("4")
        assert released.return_status(now) == ReturnStatus.RELEASED

        with pytest.raises(ValidationError):
            await MarkReturnedUseCase(unit_of_work=uow).execute(released.id, actor)

        stored = await GetEventUseCase(unit_of_work=uow).execute(
            EventKind.OUTFLOW, released.id, actor
        )
        assert stored.return_status(now) == ReturnStatus.RELEASED


class TestReportsFlow:
    async def test_weekday_report(self, uow, receive, release, actor, now):
        # ``now`` is a Monday; 5 days before it is the previous Wednesday
        for _ in range(3):
            await receive("10")
        await release("1", days_ago=5)

        response = await GetReportUseCase(unit_of_work=uow).execute(
            ReportRequest(period=ReportPeriod.WEEK, dimension=ReportDimension.WEEKDAY),
            actor,
            now=now,
        )

        rows = {row.day: row for row in response.rows}
        assert (rows["Monday"].activities, rows["Monday"].inflows) == (3, 3)
        assert (rows["Wednesday"].activities, rows["Wednesday"].outflows) == (1, 1)
        assert rows["Friday"].activities == 0

    async def test_period_filter_uses_domain_date(self, uow, seeded, receive, actor, now):
        await receive("10", days_ago=2)
        await receive("10", days_ago=45)

        week = await GetReportUseCase(unit_of_work=uow).execute(
            ReportRequest(period=ReportPeriod.WEEK, dimension=ReportDimension.PROJECT),
            actor,
            now=now,
        )
        everything = await GetReportUseCase(unit_of_work=uow).execute(
            ReportRequest(period=ReportPeriod.ALL, dimension=ReportDimension.PROJECT),
            actor,
            now=now,
        )

        assert week.rows[0].project_id == seeded.project.id
        assert week.rows[0].inflow_count == 1
        assert everything.rows[0].inflow_count == 2

    async def test_material_report_carries_net_quantity(
        self, uow, seeded, receive, release, actor
    ):
        await receive("100")
        await release("30")

        response = await GetReportUseCase(unit_of_work=uow).execute(
            ReportRequest(period=ReportPeriod.ALL, dimension=ReportDimension.MATERIAL), actor
        )

        row = response.model_dump(mode="json")["rows"][0]
        assert row["material_id"] == seeded.material.id
        assert row["activities"] == 2
        assert Decimal(row["net_quantity"]) == Decimal("70")

    async def test_category_report(self, uow, seeded, receive, actor, now):
        await receive("15")
        response = await GetReportUseCase(unit_of_work=uow).execute(
            ReportRequest(dimension=ReportDimension.CATEGORY), actor, now=now
        )
        assert response.rows[0].category_name == "Electrical"
        assert response.rows[0].low_stock == 1

    async def test_turnover_and_criticality(self, uow, seeded, receive, release, actor):
        await receive("120")
        await release("80")

        turnover = await GetAnalyticsUseCase(unit_of_work=uow).turnover(actor)
        assert turnover[0].turnover_rate == Decimal("2")

        await release("30")
        critical = await GetAnalyticsUseCase(unit_of_work=uow).criticality(actor)
        assert critical[0].material_id == seeded.material.id
        assert critical[0].recent_activity == 3
        assert critical[0].criticality == Decimal("30")

    async def test_trends_and_summary(self, uow, receive, release, actor, now):
        await receive("10", days_ago=1)
        await receive("10", days_ago=2)
        await receive("10", days_ago=9)
        await release("5", days_ago=1)

        analytics = GetAnalyticsUseCase(unit_of_work=uow)
        trends = await analytics.trends(actor, now=now)
        assert trends.current_inflows == 2
        assert trends.previous_inflows == 1
        assert trends.inflow_trend == 100.0

        summary = await analytics.summary(ReportPeriod.WEEK, actor, now=now)
        assert summary.inflows == 2
        assert summary.inflow_value == Decimal("40.00")

    async def test_dashboard_and_feed(self, uow, seeded, receive, release, actor):
        await receive("100")
        await release("90")

        dashboard = await GetDashboardUseCase(unit_of_work=uow).execute(actor)
        assert dashboard.summary.total_materials == 1
        assert dashboard.summary.low_stock_count == 1
        assert dashboard.summary.stock_health == 100.0
        assert len(dashboard.recent_activities) == 2

        feed = await GetActivityFeedUseCase(unit_of_work=uow).execute(actor)
        assert feed[0].type == EventKind.OUTFLOW
        assert feed[0].material_name == seeded.material.name


class TestReferenceIntegrity:
    async def test_unit_linked_to_active_material_cannot_be_deactivated(self, uow, seeded, actor):
        with pytest.raises(ReferentialIntegrityError) as exc_info:
            await DeactivateReferenceUseCase(unit_of_work=uow).execute(
                ReferenceKind.UNIT, seeded.box.id, actor
            )
        assert exc_info.value.details["dependent"] == "materials"

    async def test_unit_with_events_cannot_be_deactivated(self, uow, seeded, receive, actor):
        roll = await SQLiteReferenceStore().create(Unit(name="Roll"))
        await receive("10", unit_id=roll.id)

        with pytest.raises(ReferentialIntegrityError) as exc_info:
            await DeactivateReferenceUseCase(unit_of_work=uow).execute(
                ReferenceKind.UNIT, roll.id, actor
            )
        assert exc_info.value.details["dependent"] == "events"

    async def test_material_with_events_cannot_be_deactivated(self, uow, seeded, receive, actor):
        await receive("10")
        with pytest.raises(ReferentialIntegrityError):
            await DeactivateReferenceUseCase(unit_of_work=uow).execute(
                ReferenceKind.MATERIAL, seeded.material.id, actor
            )

    async def test_category_with_active_material_cannot_be_deactivated(self, uow, seeded, actor):
        with pytest.raises(ReferentialIntegrityError):
            await DeactivateReferenceUseCase(unit_of_work=uow).execute(
                ReferenceKind.CATEGORY, seeded.category.id, actor
            )


class TestReferenceUpdates:
    async def test_raising_min_stock_level_flips_status(self, uow, seeded, receive, actor):
        await receive("30")
        assert (await stock_of(uow, seeded.material.id)).status == StockStatus.IN_STOCK

        await UpdateReferenceUseCase(unit_of_work=uow).execute(
            ReferenceKind.MATERIAL,
            seeded.material.id,
            UpdateMaterialRequest(min_stock_level=Decimal("50")),
            actor,
        )

        snapshot = await stock_of(uow, seeded.material.id)
        assert snapshot.min_stock_level == Decimal("50.00")
        assert snapshot.status == StockStatus.LOW_STOCK
        alerts = await GetLowStockAlertsUseCase(unit_of_work=uow).execute(actor)
        assert [a.material_id for a in alerts] == [seeded.material.id]

    async def test_rename_guards_case_insensitive_duplicates(self, uow, seeded, actor):
        conduit = await SQLiteReferenceStore().create(
            Material(name="Conduit", category_id=seeded.category.id)
        )
        update = UpdateReferenceUseCase(unit_of_work=uow)

        with pytest.raises(DuplicateNameError):
            await update.execute(
                ReferenceKind.MATERIAL,
                conduit.id,
                UpdateMaterialRequest(name="CABLE 3X2.5MM"),
                actor,
            )

        renamed = await update.execute(
            ReferenceKind.MATERIAL, conduit.id, UpdateMaterialRequest(name="CONDUIT"), actor
        )
        assert renamed.name == "CONDUIT"
