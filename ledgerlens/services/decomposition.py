"""
Time-Series Decomposition Service

Additive decomposition of a monthly series:

    original = trend + seasonal + residual

Algorithm:
1. Sort the series by month ("YYYY-MM" sorts chronologically as text)
2. Trend: centered moving average. The window is always odd (period + 1 for
   an even period, period otherwise), which leaves period // 2 points
   undefined at each end; those take the nearest defined trend value.
3. Detrend: value - trend
4. Seasonal index: mean detrended value per calendar month (1-12), then
   re-centered by the mean of the twelve averages so a full year of
   seasonal components sums to zero. Months never observed average to 0
   before re-centering.
5. Residual: value - trend - seasonal
6. Trend direction: mean trend of the first half vs the second half
   (> +5% up, < -5% down, relative to |first half mean|)
7. Seasonal strength: 1 - Var(residual) / Var(detrended), clamped to
   [0, 1], using population variance about zero.

A series shorter than period + 1 points returns an empty result (no points,
no pattern, flat, strength 0).
"""

import logging
from typing import List, Optional, Sequence

from ledgerlens.models.enums import TrendDirection
from ledgerlens.models.records import MonthlyValue, SalesRecord
from ledgerlens.models.schemas import DecompositionPoint, DecompositionResult, SeasonalFactor
from ledgerlens.services.aggregation import clamp, extract_month, mean, month_of_year, sum_by_key

logger = logging.getLogger(__name__)

DEFAULT_PERIOD: int = 12
MONTHS_PER_YEAR: int = 12

# Relative change between half-series trend means that counts as a direction
TREND_THRESHOLD: float = 0.05


def build_monthly_series(sales: Sequence[SalesRecord]) -> List[MonthlyValue]:
    """
    Sum sales amounts per month into an ascending series.

    Sales without a usable date are left out. Months with no sales are not
    filled in.
    """
    totals = sum_by_key(sales, lambda r: extract_month(r.salesDate), lambda r: r.amount)
    return [MonthlyValue(month=month, value=value) for month, value in sorted(totals.items())]


def _centered_trend(values: List[float], period: int) -> List[float]:
    n = len(values)
    half_window = period // 2
    window_size = period + 1 if period % 2 == 0 else period

    trend: List[Optional[float]] = [None] * n
    for i in range(half_window, n - half_window):
        trend[i] = sum(values[i - half_window:i + half_window + 1]) / window_size

    defined = [i for i, t in enumerate(trend) if t is not None]
    if not defined:
        return list(values)

    first, last = defined[0], defined[-1]
    return [
        trend[first] if i < first else trend[last] if i > last else trend[i]
        for i in range(n)
    ]


def _trend_direction(trend: List[float]) -> TrendDirection:
    if len(trend) < 2:
        return TrendDirection.FLAT

    split = len(trend) // 2
    first_avg = mean(trend[:split])
    second_avg = mean(trend[split:])
    if first_avg == 0:
        return TrendDirection.FLAT

    change = (second_avg - first_avg) / abs(first_avg)
    if change > TREND_THRESHOLD:
        return TrendDirection.UP
    if change < -TREND_THRESHOLD:
        return TrendDirection.DOWN
    return TrendDirection.FLAT


def decompose_time_series(
    series: Sequence[MonthlyValue],
    period: int = DEFAULT_PERIOD,
) -> DecompositionResult:
    """
    Decompose a monthly series into trend, seasonal and residual parts.

    Args:
        series: Monthly points keyed by "YYYY-MM", in any order
        period: Seasonal period in months

    Returns:
        DecompositionResult with one point per input month (ascending) and a
        twelve-entry zero-mean seasonal pattern
    """
    if len(series) < period + 1:
        logger.info(
            f"Decomposition needs at least {period + 1} points, got {len(series)}; "
            f"returning empty result"
        )
        return DecompositionResult()

    ordered = sorted(series, key=lambda p: p.month)
    values = [p.value for p in ordered]
    months = [month_of_year(p.month) for p in ordered]
    n = len(values)

    trend = _centered_trend(values, period)
    detrended = [v - t for v, t in zip(values, trend)]

    sums = [0.0] * MONTHS_PER_YEAR
    counts = [0] * MONTHS_PER_YEAR
    for month, value in zip(months, detrended):
        if month is None:
            continue
        sums[month - 1] += value
        counts[month - 1] += 1

    averages = [s / c if c else 0.0 for s, c in zip(sums, counts)]
    offset = sum(averages) / MONTHS_PER_YEAR
    seasonal_index = [a - offset for a in averages]

    points: List[DecompositionPoint] = []
    for point, month, trend_value in zip(ordered, months, trend):
        seasonal = seasonal_index[month - 1] if month is not None else 0.0
        points.append(
            DecompositionPoint(
                month=point.month,
                original=point.value,
                trend=trend_value,
                seasonal=seasonal,
                residual=point.value - trend_value - seasonal,
            )
        )

    var_detrended = sum(d * d for d in detrended) / n
    var_residual = sum(p.residual * p.residual for p in points) / n
    strength = clamp(1 - var_residual / var_detrended, 0.0, 1.0) if var_detrended > 0 else 0.0

    return DecompositionResult(
        points=points,
        seasonalPattern=[
            SeasonalFactor(monthIndex=i + 1, factor=factor)
            for i, factor in enumerate(seasonal_index)
        ],
        trendDirection=_trend_direction(trend),
        seasonalStrength=strength,
    )
