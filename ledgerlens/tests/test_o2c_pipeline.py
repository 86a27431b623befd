"""
Tests for the O2C pipeline service.

The tests verify:
1. Funnel totals, stage order and stage percentages
2. Outstanding is clamped at zero when collections exceed sales
3. Percentages are zero (not NaN / inf) when there are no orders
4. Monthly conversion buckets each record by its own date
"""

import math

import pytest

from ledgerlens.models import CollectionRecord, O2CStageName, OrderRecord, SalesRecord
from ledgerlens.services.o2c_pipeline import (
    compute_monthly_conversion,
    compute_o2c_pipeline,
    net_collection,
)


class TestO2CPipeline:
    """Tests for compute_o2c_pipeline."""

    def test_totals(self, sample_orders, sample_sales, sample_collections) -> None:
        result = compute_o2c_pipeline(sample_orders, sample_sales, sample_collections)

        assert result.totalOrders == 2300.0
        assert result.totalSales == 2100.0
        assert result.grossCollections == 1400.0
        assert result.prepaymentAmount == 150.0
        assert result.netCollections == 1250.0
        assert result.outstanding == 850.0

    def test_stage_order_and_percentages(self, sample_orders, sample_sales, sample_collections) -> None:
        result = compute_o2c_pipeline(sample_orders, sample_sales, sample_collections)

        assert [s.stage for s in result.stages] == [
            O2CStageName.ORDER,
            O2CStageName.REVENUE_CONVERSION,
            O2CStageName.NET_COLLECTION,
            O2CStageName.OUTSTANDING,
        ]
        assert result.stages[0].percentage == 100.0
        assert result.stages[1].percentage == pytest.approx(2100 / 2300 * 100)
        assert result.stages[2].percentage == pytest.approx(1250 / 2300 * 100)
        assert result.stages[3].percentage == pytest.approx(850 / 2300 * 100)
        assert [s.count for s in result.stages] == [3, 4, 3, 0]

    def test_outstanding_never_negative(self) -> None:
        """totalSales = 0 with 100 net collected reports 0 outstanding."""
        result = compute_o2c_pipeline(
            [OrderRecord(amount=100.0)],
            [],
            [CollectionRecord(collectedAmount=100.0)],
        )
        assert result.netCollections == 100.0
        assert result.outstanding == 0.0

    def test_zero_orders_zero_percentages(self) -> None:
        result = compute_o2c_pipeline(
            [],
            [SalesRecord(amount=500.0)],
            [CollectionRecord(collectedAmount=200.0)],
        )
        for stage in result.stages:
            assert stage.percentage == 0.0
            assert math.isfinite(stage.percentage)

    def test_net_collection_can_be_negative(self) -> None:
        record = CollectionRecord(collectedAmount=100.0, bookedPrepayment=150.0)
        assert net_collection(record) == -50.0

    def test_empty_inputs(self) -> None:
        result = compute_o2c_pipeline([], [], [])
        assert result.outstanding == 0.0
        assert len(result.stages) == 4


class TestMonthlyConversion:
    """Tests for compute_monthly_conversion."""

    def test_months_from_any_source(self, sample_orders, sample_sales, sample_collections) -> None:
        rows = compute_monthly_conversion(sample_orders, sample_sales, sample_collections)
        assert [r.month for r in rows] == ['2024-01', '2024-02', '2024-03']

    def test_monthly_amounts(self, sample_orders, sample_sales, sample_collections) -> None:
        rows = {r.month: r for r in compute_monthly_conversion(sample_orders, sample_sales, sample_collections)}

        january = rows['2024-01']
        assert january.orders == 1500.0
        assert january.sales == 1300.0
        assert january.collections == 500.0
        assert january.conversionRate == pytest.approx(1300 / 1500 * 100)
        assert january.collectionRate == pytest.approx(500 / 1300 * 100)

        february = rows['2024-02']
        assert february.orders == 800.0
        assert february.sales == 700.0
        assert february.collections == 750.0

    def test_rates_zero_guarded(self, sample_orders, sample_sales, sample_collections) -> None:
        rows = {r.month: r for r in compute_monthly_conversion(sample_orders, sample_sales, sample_collections)}
        march = rows['2024-03']
        assert march.orders == 0.0
        assert march.conversionRate == 0.0
        assert march.collectionRate == 0.0

    def test_undated_rows_skipped(self) -> None:
        rows = compute_monthly_conversion(
            [OrderRecord(orderDate='', amount=100.0), OrderRecord(orderDate='2024-05-01', amount=50.0)],
            [SalesRecord(salesDate='garbage', amount=10.0)],
            [],
        )
        assert len(rows) == 1
        assert rows[0].month == '2024-05'
        assert rows[0].orders == 50.0

    def test_empty_inputs(self) -> None:
        assert compute_monthly_conversion([], [], []) == []
