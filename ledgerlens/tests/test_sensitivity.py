"""
Tests for the price x volume sensitivity service.

The tests verify:
1. Grid shape and price-major cell order
2. The (0, 0) cell reproduces the base figures exactly
3. Fixed SG&A and volume-only COGS in the cell formulas
4. % changes relative to the absolute base value
5. Insight: dominant factor bands, price-drop warning, balance point
"""

import pytest

from ledgerlens.models import DominantFactor, SensitivityMetric
from ledgerlens.services.sensitivity import (
    DEFAULT_STEPS,
    compute_sensitivity_grid,
    generate_sensitivity_insight,
)


def cell_at(result, price_change, volume_change):
    """Return the grid cell for a (price, volume) pair."""
    return next(
        c for c in result.grid
        if c.priceChange == price_change and c.volumeChange == volume_change
    )


class TestSensitivityGrid:
    """Tests for compute_sensitivity_grid."""

    def test_default_grid_shape(self) -> None:
        result = compute_sensitivity_grid(1000.0, 300.0, 100.0)

        assert len(result.grid) == 81
        assert result.priceRange == DEFAULT_STEPS
        assert result.volumeRange == DEFAULT_STEPS

    def test_price_major_order(self) -> None:
        result = compute_sensitivity_grid(1000.0, 300.0, 100.0, [-5.0, 5.0], [0.0, 10.0, 20.0])

        assert [(c.priceChange, c.volumeChange) for c in result.grid] == [
            (-5.0, 0.0), (-5.0, 10.0), (-5.0, 20.0),
            (5.0, 0.0), (5.0, 10.0), (5.0, 20.0),
        ]

    @pytest.mark.parity
    def test_base_cell_is_exact(self) -> None:
        result = compute_sensitivity_grid(1234.56, 345.67, 123.45)
        base = cell_at(result, 0.0, 0.0)

        assert base.resultSales == 1234.56
        assert base.resultGrossProfit == 345.67
        assert base.resultOpProfit == 123.45
        assert base.salesChange == 0.0
        assert base.gpChange == 0.0
        assert base.opChange == 0.0

    def test_price_up_flows_to_profit(self) -> None:
        """Price only moves revenue; COGS and SG&A are unchanged."""
        cell = cell_at(compute_sensitivity_grid(1000.0, 300.0, 100.0), 10.0, 0.0)

        assert cell.resultSales == pytest.approx(1100.0)
        assert cell.resultGrossProfit == pytest.approx(400.0)
        assert cell.resultOpProfit == pytest.approx(200.0)
        assert cell.opChange == pytest.approx(100.0)

    def test_volume_scales_cogs(self) -> None:
        """Volume moves revenue and COGS; SG&A stays fixed."""
        cell = cell_at(compute_sensitivity_grid(1000.0, 300.0, 100.0), 0.0, 10.0)

        assert cell.resultSales == pytest.approx(1100.0)
        assert cell.resultGrossProfit == pytest.approx(330.0)
        assert cell.resultOpProfit == pytest.approx(130.0)

    def test_combined_levers(self) -> None:
        cell = cell_at(compute_sensitivity_grid(1000.0, 300.0, 100.0), -10.0, 20.0)
        sales = 1000.0 * 0.9 * 1.2
        cogs = 700.0 * 1.2

        assert cell.resultSales == pytest.approx(sales)
        assert cell.resultGrossProfit == pytest.approx(sales - cogs)
        assert cell.resultOpProfit == pytest.approx(sales - cogs - 200.0)

    def test_loss_making_base_reports_improvement_as_positive(self) -> None:
        cell = cell_at(compute_sensitivity_grid(1000.0, 100.0, -100.0), 10.0, 0.0)

        assert cell.resultOpProfit == pytest.approx(0.0)
        assert cell.opChange == pytest.approx(100.0)

    def test_zero_base_change_is_zero(self) -> None:
        cell = cell_at(compute_sensitivity_grid(1000.0, 200.0, 0.0), 10.0, 0.0)

        assert cell.resultOpProfit == pytest.approx(100.0)
        assert cell.opChange == 0.0

    def test_empty_steps(self) -> None:
        result = compute_sensitivity_grid(1000.0, 300.0, 100.0, [], [0.0])
        assert result.grid == []


class TestSensitivityInsight:
    """Tests for generate_sensitivity_insight."""

    def test_price_dominant_for_operating_profit(self) -> None:
        insight = generate_sensitivity_insight(compute_sensitivity_grid(1000.0, 300.0, 100.0))

        assert insight.metric == SensitivityMetric.OPERATING_PROFIT
        assert insight.dominantFactor == DominantFactor.PRICE
        assert insight.priceImpact10 == pytest.approx(100.0)
        assert insight.volumeImpact10 == pytest.approx(30.0)
        assert insight.priceDrop10Impact == pytest.approx(-100.0)

    def test_large_drop_adds_caution(self) -> None:
        insight = generate_sensitivity_insight(compute_sensitivity_grid(1000.0, 300.0, 100.0))

        assert "100.0%" in insight.riskWarning
        assert "conditional on higher volume" in insight.riskWarning

    def test_small_drop_has_no_caution(self) -> None:
        insight = generate_sensitivity_insight(
            compute_sensitivity_grid(1000.0, 300.0, 100.0),
            SensitivityMetric.SALES,
        )
        assert "10.0%" in insight.riskWarning
        assert "conditional" not in insight.riskWarning

    def test_balanced_for_sales(self) -> None:
        """Sales respond identically to +10% price and +10% volume."""
        insight = generate_sensitivity_insight(
            compute_sensitivity_grid(1000.0, 300.0, 100.0),
            SensitivityMetric.SALES,
        )
        assert insight.dominantFactor == DominantFactor.BALANCED

    def test_volume_dominant_when_price_cell_missing(self) -> None:
        result = compute_sensitivity_grid(1000.0, 300.0, 100.0, [0.0], [0.0, 10.0])
        insight = generate_sensitivity_insight(result)

        assert insight.priceImpact10 == 0.0
        assert insight.dominantFactor == DominantFactor.VOLUME

    def test_balance_point_for_sales(self) -> None:
        """0.95 * 1.05 < 1 <= 0.95 * 1.10, so 10% volume offsets a 5% price cut."""
        insight = generate_sensitivity_insight(
            compute_sensitivity_grid(1000.0, 300.0, 100.0),
            SensitivityMetric.SALES,
        )
        assert insight.balancePoint is not None
        assert "10%" in insight.balancePoint

    def test_balance_point_for_operating_profit(self) -> None:
        """GP at a 5% cut is 350 * vf; it reaches the base 400 first at +15%."""
        insight = generate_sensitivity_insight(compute_sensitivity_grid(1000.0, 400.0, 100.0))
        assert "15%" in insight.balancePoint

    def test_no_balance_point_when_out_of_range(self) -> None:
        """A thin gross margin needs more than +20% volume to offset the cut."""
        insight = generate_sensitivity_insight(compute_sensitivity_grid(1000.0, 60.0, 10.0))
        assert insight.balancePoint is None

    def test_zero_base_metric(self) -> None:
        insight = generate_sensitivity_insight(compute_sensitivity_grid(1000.0, 200.0, 0.0))

        assert "cannot be computed" in insight.riskWarning
        assert insight.balancePoint is None
