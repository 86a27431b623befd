"""
Tests for the what-if scenario service.

The tests verify:
1. Scenario P&L formulas per organization
2. Additive cost-rate points with clamping to [0, 200]
3. Ordering by operating profit delta
4. Portfolio summary with blended margins
5. Single-lever sweeps
"""

import pytest

from ledgerlens.models import ScenarioParams, SweepParameter
from ledgerlens.services.what_if import (
    compute_scenario_summary,
    compute_sensitivity_sweep,
    compute_what_if_scenario,
    scenario_for,
)


class TestWhatIfScenario:
    """Tests for compute_what_if_scenario."""

    def test_zero_scenario_matches_base(self, make_org_profit) -> None:
        result = compute_what_if_scenario(
            [make_org_profit('A Team', sales=1000.0, cost_rate=70.0, sga=100.0)],
            ScenarioParams(),
        )[0]

        assert result.scenarioSales == 1000.0
        assert result.scenarioGrossProfit == pytest.approx(300.0)
        assert result.scenarioOperatingProfit == pytest.approx(200.0)
        assert result.operatingProfitDelta == pytest.approx(0.0)
        assert result.marginDelta == pytest.approx(0.0)

    def test_sales_growth(self, make_org_profit) -> None:
        result = compute_what_if_scenario(
            [make_org_profit('A Team', sales=1000.0, cost_rate=70.0, sga=100.0)],
            ScenarioParams(salesChangePercent=10.0),
        )[0]

        assert result.scenarioSales == pytest.approx(1100.0)
        assert result.scenarioGrossProfit == pytest.approx(330.0)
        assert result.scenarioOperatingProfit == pytest.approx(230.0)
        assert result.salesDelta == pytest.approx(100.0)
        assert result.operatingProfitDelta == pytest.approx(30.0)
        assert result.baseOperatingMargin == pytest.approx(20.0)
        assert result.scenarioOperatingMargin == pytest.approx(230.0 / 1100.0 * 100)

    def test_cost_rate_points_are_additive(self, make_org_profit) -> None:
        """+2 points on a 70% cost rate means 72%, not 71.4%."""
        result = compute_what_if_scenario(
            [make_org_profit('A Team', sales=1000.0, cost_rate=70.0, sga=100.0)],
            ScenarioParams(costRateChangePoints=2.0),
        )[0]

        assert result.scenarioGrossProfit == pytest.approx(280.0)
        assert result.operatingProfitDelta == pytest.approx(-20.0)

    def test_sga_change(self, make_org_profit) -> None:
        result = compute_what_if_scenario(
            [make_org_profit('A Team', sales=1000.0, cost_rate=70.0, sga=100.0)],
            ScenarioParams(sgaChangePercent=-50.0),
        )[0]

        assert result.scenarioOperatingProfit == pytest.approx(250.0)
        assert result.grossProfitDelta == pytest.approx(0.0)

    @pytest.mark.parametrize("cost_rate,points,expected_gp", [
        (190.0, 20.0, -1000.0),
        (10.0, -30.0, 1000.0),
    ])
    def test_cost_rate_clamped(self, make_org_profit, cost_rate, points, expected_gp) -> None:
        result = compute_what_if_scenario(
            [make_org_profit('A Team', sales=1000.0, cost_rate=cost_rate)],
            ScenarioParams(costRateChangePoints=points),
        )[0]
        assert result.scenarioGrossProfit == pytest.approx(expected_gp)

    def test_zero_sales_margin_is_zero(self, make_org_profit) -> None:
        result = compute_what_if_scenario(
            [make_org_profit('Idle Team', sales=0.0, sga=50.0)],
            ScenarioParams(salesChangePercent=10.0),
        )[0]

        assert result.baseOperatingMargin == 0.0
        assert result.scenarioOperatingMargin == 0.0
        assert result.scenarioOperatingProfit == pytest.approx(-50.0)

    def test_sorted_by_operating_profit_delta(self, sample_org_profit) -> None:
        results = compute_what_if_scenario(sample_org_profit, ScenarioParams(salesChangePercent=10.0))

        assert [r.org for r in results] == ['Building Materials Team', 'Chemicals Team', 'Dormant Team']
        deltas = [r.operatingProfitDelta for r in results]
        assert deltas == sorted(deltas, reverse=True)

    def test_empty(self) -> None:
        assert compute_what_if_scenario([], ScenarioParams(salesChangePercent=10.0)) == []


class TestScenarioSummary:
    """Tests for compute_scenario_summary."""

    def test_blended_margins(self, sample_org_profit) -> None:
        results = compute_what_if_scenario(sample_org_profit, ScenarioParams(salesChangePercent=10.0))
        summary = compute_scenario_summary(results)

        assert summary.baseTotalSales == 15000.0
        assert summary.baseTotalOperatingProfit == pytest.approx(1000.0 + 200.0)
        assert summary.baseAvgMargin == pytest.approx(1200.0 / 15000.0 * 100)
        assert summary.scenarioTotalSales == pytest.approx(16500.0)
        assert summary.scenarioTotalOperatingProfit == pytest.approx(1200.0 + 200.0 + 50.0)
        assert summary.scenarioAvgMargin == pytest.approx(1450.0 / 16500.0 * 100)

    def test_empty(self) -> None:
        summary = compute_scenario_summary([])
        assert summary.baseTotalSales == 0.0
        assert summary.scenarioAvgMargin == 0.0


class TestSensitivitySweep:
    """Tests for scenario_for and compute_sensitivity_sweep."""

    @pytest.mark.parametrize("parameter,field", [
        (SweepParameter.SALES, 'salesChangePercent'),
        (SweepParameter.COST, 'costRateChangePoints'),
        (SweepParameter.SGA, 'sgaChangePercent'),
    ])
    def test_scenario_for_sets_one_lever(self, parameter, field) -> None:
        params = scenario_for(parameter, 7.5)
        values = params.model_dump()

        assert values[field] == 7.5
        assert sum(v for k, v in values.items() if k != field) == 0.0

    def test_ascending_values(self, sample_org_profit) -> None:
        points = compute_sensitivity_sweep(sample_org_profit, SweepParameter.SALES, [10.0, -10.0, 0.0])

        assert [p.paramValue for p in points] == [-10.0, 0.0, 10.0]
        assert points[1].operatingProfit == pytest.approx(1200.0)
        assert points[0].operatingProfit < points[1].operatingProfit < points[2].operatingProfit

    def test_cost_sweep_decreases_profit(self, sample_org_profit) -> None:
        points = compute_sensitivity_sweep(sample_org_profit, SweepParameter.COST, [0.0, 5.0])

        assert points[1].operatingProfit == pytest.approx(1200.0 - 750.0)
        assert points[1].operatingMargin == pytest.approx(450.0 / 15000.0 * 100)

    def test_empty_inputs(self, sample_org_profit) -> None:
        assert compute_sensitivity_sweep(sample_org_profit, SweepParameter.SGA, []) == []
        assert compute_sensitivity_sweep([], SweepParameter.SGA, [1.0]) == []
