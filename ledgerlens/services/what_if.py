"""
What-If Scenario Service

Re-projects each organization's P&L under a scenario and sweeps a single
scenario lever across a range of values.

Scenario levers (ScenarioParams):
- salesChangePercent: +10 means sales grow 10%
- costRateChangePoints: +2 means the cost-of-sales rate rises by 2 points
  (additive, e.g. 72% -> 74%), clamped to [0, 200]
- sgaChangePercent: -5 means SG&A shrinks 5%

Per organization:
    scenarioSales = sales * (1 + salesChangePercent / 100)
    scenarioCost  = scenarioSales * clamp(costRate + points, 0, 200) / 100
    scenarioGP    = scenarioSales - scenarioCost
    scenarioSGA   = sga * (1 + sgaChangePercent / 100)
    scenarioOP    = scenarioGP - scenarioSGA
    margin        = OP / sales * 100 (0 when sales is 0)

Base figures are the P&L actuals as reported. The scenario gross profit is
re-derived from the cost rate, so a zero scenario need not reproduce the
reported gross profit exactly.
"""

import logging
from typing import List, Sequence

from ledgerlens.models.enums import SweepParameter
from ledgerlens.models.records import OrgProfitRecord
from ledgerlens.models.schemas import ScenarioParams, ScenarioResult, ScenarioSummary, SensitivityPoint
from ledgerlens.services.aggregation import clamp, safe_percentage

logger = logging.getLogger(__name__)

COST_RATE_MIN: float = 0.0
COST_RATE_MAX: float = 200.0


def compute_what_if_scenario(
    org_records: Sequence[OrgProfitRecord],
    params: ScenarioParams,
) -> List[ScenarioResult]:
    """
    Apply a scenario to every organization.

    Args:
        org_records: Organization P&L records (actuals are the base)
        params: Scenario levers

    Returns:
        ScenarioResult per organization, sorted descending by
        operatingProfitDelta; empty when there are no records
    """
    if not org_records:
        return []

    results: List[ScenarioResult] = []
    for record in org_records:
        base_sales = record.sales.actual
        base_gross_profit = record.grossProfit.actual
        base_operating_profit = record.operatingProfit.actual
        base_margin = safe_percentage(base_operating_profit, base_sales)

        scenario_sales = base_sales * (1 + params.salesChangePercent / 100)
        cost_rate = clamp(record.costRate.actual + params.costRateChangePoints, COST_RATE_MIN, COST_RATE_MAX)
        scenario_cost = scenario_sales * cost_rate / 100
        scenario_gross_profit = scenario_sales - scenario_cost
        scenario_sga = record.sga.actual * (1 + params.sgaChangePercent / 100)
        scenario_operating_profit = scenario_gross_profit - scenario_sga
        scenario_margin = safe_percentage(scenario_operating_profit, scenario_sales)

        results.append(
            ScenarioResult(
                org=record.orgTeam,
                baseSales=base_sales,
                baseGrossProfit=base_gross_profit,
                baseOperatingProfit=base_operating_profit,
                baseOperatingMargin=base_margin,
                scenarioSales=scenario_sales,
                scenarioGrossProfit=scenario_gross_profit,
                scenarioOperatingProfit=scenario_operating_profit,
                scenarioOperatingMargin=scenario_margin,
                salesDelta=scenario_sales - base_sales,
                grossProfitDelta=scenario_gross_profit - base_gross_profit,
                operatingProfitDelta=scenario_operating_profit - base_operating_profit,
                marginDelta=scenario_margin - base_margin,
            )
        )

    results.sort(key=lambda r: r.operatingProfitDelta, reverse=True)
    return results


def compute_scenario_summary(results: Sequence[ScenarioResult]) -> ScenarioSummary:
    """Portfolio totals with blended (sales-weighted) margins."""
    if not results:
        return ScenarioSummary()

    base_sales = sum(r.baseSales for r in results)
    base_op = sum(r.baseOperatingProfit for r in results)
    scenario_sales = sum(r.scenarioSales for r in results)
    scenario_op = sum(r.scenarioOperatingProfit for r in results)

    return ScenarioSummary(
        baseTotalSales=base_sales,
        baseTotalOperatingProfit=base_op,
        baseAvgMargin=safe_percentage(base_op, base_sales),
        scenarioTotalSales=scenario_sales,
        scenarioTotalOperatingProfit=scenario_op,
        scenarioAvgMargin=safe_percentage(scenario_op, scenario_sales),
    )


def scenario_for(parameter: SweepParameter, value: float) -> ScenarioParams:
    """Scenario with only the named lever set; the other two stay at zero."""
    return ScenarioParams(
        salesChangePercent=value if parameter == SweepParameter.SALES else 0.0,
        costRateChangePoints=value if parameter == SweepParameter.COST else 0.0,
        sgaChangePercent=value if parameter == SweepParameter.SGA else 0.0,
    )


def compute_sensitivity_sweep(
    org_records: Sequence[OrgProfitRecord],
    parameter: SweepParameter,
    value_range: Sequence[float],
) -> List[SensitivityPoint]:
    """
    Sweep one scenario lever and report portfolio operating profit and margin.

    Args:
        org_records: Organization P&L records
        parameter: Lever to vary
        value_range: Lever values; evaluated in ascending order

    Returns:
        One SensitivityPoint per value, ascending by value. Empty when
        either input is empty.
    """
    if not org_records or not value_range:
        return []

    points: List[SensitivityPoint] = []
    for value in sorted(value_range):
        summary = compute_scenario_summary(
            compute_what_if_scenario(org_records, scenario_for(parameter, value))
        )
        points.append(
            SensitivityPoint(
                paramValue=value,
                operatingProfit=summary.scenarioTotalOperatingProfit,
                operatingMargin=summary.scenarioAvgMargin,
            )
        )

    logger.debug(f"Sensitivity sweep over {parameter.value}: {len(points)} points")
    return points
