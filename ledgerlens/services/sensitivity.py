"""
Price x Volume Sensitivity Service

Builds a two-lever grid showing how sales, gross profit and operating profit
respond to simultaneous price and volume changes.

Cost structure inferred from the base figures:
    baseCOGS = baseSales - baseGrossProfit
    baseSGA  = baseGrossProfit - baseOpProfit

Per cell (p = price step %, v = volume step %):
    sales = baseSales * (1 + p/100) * (1 + v/100)
    COGS  = baseCOGS * (1 + v/100)        unit cost moves with volume only
    GP    = sales - COGS
    OP    = GP - baseSGA                  SG&A is fixed

Each cell also carries the % change of the three metrics relative to the
absolute base value (0 when the base is 0), so a loss-making base still
reports improvements as positive changes.
"""

import logging
from typing import List, Optional, Sequence

from ledgerlens.models.enums import DominantFactor, SensitivityMetric
from ledgerlens.models.schemas import SensitivityCell, SensitivityInsight, SensitivityResult
from ledgerlens.services.aggregation import safe_percentage

logger = logging.getLogger(__name__)

DEFAULT_STEPS: List[float] = [-20.0, -15.0, -10.0, -5.0, 0.0, 5.0, 10.0, 15.0, 20.0]

# Impact ratio (|price impact| / |volume impact|) bands for the dominant factor
PRICE_DOMINANT_RATIO: float = 1.2
VOLUME_DOMINANT_RATIO: float = 0.8

# Price drop (in % of the metric) above which the warning adds a caution
LARGE_DROP_THRESHOLD: float = 15.0

_METRIC_FIELDS = {
    SensitivityMetric.SALES: ('salesChange', 'baseSales', 'sales'),
    SensitivityMetric.GROSS_PROFIT: ('gpChange', 'baseGrossProfit', 'gross profit'),
    SensitivityMetric.OPERATING_PROFIT: ('opChange', 'baseOpProfit', 'operating profit'),
}


def _relative_change(result: float, base: float) -> float:
    return safe_percentage(result - base, abs(base))


def compute_sensitivity_grid(
    base_sales: float,
    base_gross_profit: float,
    base_op_profit: float,
    price_steps: Optional[Sequence[float]] = None,
    volume_steps: Optional[Sequence[float]] = None,
) -> SensitivityResult:
    """
    Compute the price x volume sensitivity grid.

    Args:
        base_sales: Current sales
        base_gross_profit: Current gross profit
        base_op_profit: Current operating profit
        price_steps: Price changes in %, defaults to -20..20 step 5
        volume_steps: Volume changes in %, defaults to -20..20 step 5

    Returns:
        SensitivityResult with len(price_steps) * len(volume_steps) cells,
        price-major (all volume steps for the first price step, then the
        next price step, ...)
    """
    prices = list(DEFAULT_STEPS if price_steps is None else price_steps)
    volumes = list(DEFAULT_STEPS if volume_steps is None else volume_steps)

    grid: List[SensitivityCell] = []
    for price_change in prices:
        price_factor = 1 + price_change / 100
        for volume_change in volumes:
            volume_factor = 1 + volume_change / 100

            result_sales = base_sales * price_factor * volume_factor
            # Same as result_sales - base_cogs * volume_factor and
            # result_gp - base_sga, arranged so the (0, 0) cell returns the
            # base figures bit for bit.
            result_gp = base_gross_profit * volume_factor + base_sales * volume_factor * (price_factor - 1)
            result_op = base_op_profit + (result_gp - base_gross_profit)

            grid.append(
                SensitivityCell(
                    priceChange=price_change,
                    volumeChange=volume_change,
                    resultSales=result_sales,
                    resultGrossProfit=result_gp,
                    resultOpProfit=result_op,
                    salesChange=_relative_change(result_sales, base_sales),
                    gpChange=_relative_change(result_gp, base_gross_profit),
                    opChange=_relative_change(result_op, base_op_profit),
                )
            )

    logger.debug(f"Sensitivity grid: {len(prices)} price x {len(volumes)} volume steps")

    return SensitivityResult(
        baseSales=base_sales,
        baseGrossProfit=base_gross_profit,
        baseOpProfit=base_op_profit,
        grid=grid,
        priceRange=prices,
        volumeRange=volumes,
    )


def _find_cell(result: SensitivityResult, price_change: float, volume_change: float) -> Optional[SensitivityCell]:
    for cell in result.grid:
        if cell.priceChange == price_change and cell.volumeChange == volume_change:
            return cell
    return None


def generate_sensitivity_insight(
    result: SensitivityResult,
    metric: SensitivityMetric = SensitivityMetric.OPERATING_PROFIT,
) -> SensitivityInsight:
    """
    Read a sensitivity grid for one metric.

    Compares the +10% price cell with the +10% volume cell to decide which
    lever dominates, reports the impact of a 10% price drop, and looks for
    the smallest volume increase that offsets a 5% price cut.

    Cells missing from the grid contribute an impact of 0.

    Args:
        result: Grid from compute_sensitivity_grid
        metric: Metric whose % change is read

    Returns:
        SensitivityInsight with English narrative fields
    """
    change_field, base_field, label = _METRIC_FIELDS[metric]
    base_value = getattr(result, base_field)

    def impact(price_change: float, volume_change: float) -> float:
        cell = _find_cell(result, price_change, volume_change)
        return getattr(cell, change_field) if cell is not None else 0.0

    price_impact = impact(10.0, 0.0)
    volume_impact = impact(0.0, 10.0)
    price_drop_impact = impact(-10.0, 0.0)

    abs_price = abs(price_impact)
    abs_volume = abs(volume_impact)
    if abs_volume > 0:
        ratio = abs_price / abs_volume
    else:
        ratio = 999.0 if abs_price > 0 else 1.0

    if ratio >= PRICE_DOMINANT_RATIO:
        dominant = DominantFactor.PRICE
        recommendation = (
            f"Price moves {label} more than volume. Defend price first and, "
            f"where a cut is unavoidable, secure offsetting volume."
        )
    elif ratio <= VOLUME_DOMINANT_RATIO:
        dominant = DominantFactor.VOLUME
        recommendation = (
            f"Volume moves {label} more than price. Winning new customers or "
            f"growing existing accounts is the more effective lever."
        )
    else:
        dominant = DominantFactor.BALANCED
        recommendation = (
            "Price and volume have similar impact. Raising price at steady "
            "volume and growing volume at steady price work about equally; "
            "pick the more achievable one."
        )

    if base_value == 0:
        risk_warning = f"Base {label} is zero, so percentage changes cannot be computed."
    else:
        risk_warning = f"A 10% price drop reduces {label} by about {abs(price_drop_impact):.1f}%."
        if abs(price_drop_impact) > LARGE_DROP_THRESHOLD:
            risk_warning += " The impact is large; make any price cut conditional on higher volume."

    balance_point: Optional[str] = None
    if base_value != 0:
        candidates = sorted(
            (c for c in result.grid if c.priceChange == -5.0 and c.volumeChange > 0),
            key=lambda c: c.volumeChange,
        )
        for cell in candidates:
            if getattr(cell, change_field) >= 0:
                balance_point = (
                    f"With a 5% price cut, a volume increase of {cell.volumeChange:g}% "
                    f"or more keeps {label} at the current level."
                )
                break

    return SensitivityInsight(
        metric=metric,
        dominantFactor=dominant,
        priceImpact10=price_impact,
        volumeImpact10=volume_impact,
        priceDrop10Impact=price_drop_impact,
        recommendation=recommendation,
        riskWarning=risk_warning,
        balancePoint=balance_point,
    )
