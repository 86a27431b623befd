"""
Customer Lifetime Value (CLV) Service

Projects the profit a customer will generate over an estimated retention
horizon from its observed sales.

Per customer:
    avgTransactionValue = totalSales / transactionCount
    purchaseFrequency   = transactionCount / yearsInData
    customerValue       = avgTransactionValue * purchaseFrequency
                        ( = totalSales / yearsInData )

Retention scaling against the portfolio:
    avgFrequency    = mean of every customer's purchaseFrequency
    retentionFactor = min(1, frequency / avgFrequency) * 0.8 + 0.2
                      (0.5 when avgFrequency is 0)
    lifespan        = base lifespan (3 years) * retentionFactor

    clv = customerValue * avgProfitMargin * lifespan

The profit margin is a single portfolio-wide figure taken from the
organization P&L (gross profit / sales), not a per-customer margin.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from ledgerlens.models.records import OrgProfitRecord, SalesRecord
from ledgerlens.models.schemas import ClvResult, ClvSummary
from ledgerlens.services.aggregation import clamp, extract_month, mean, month_span, safe_divide

logger = logging.getLogger(__name__)

# =============================================================================
# Constants
# =============================================================================

BASE_LIFESPAN_YEARS: float = 3.0
DEFAULT_PROFIT_MARGIN: float = 0.10

MARGIN_FLOOR: float = -0.5
MARGIN_CEILING: float = 1.0

RETENTION_FLOOR: float = 0.2
RETENTION_SCALE: float = 0.8
RETENTION_FALLBACK: float = 0.5


# =============================================================================
# Inputs
# =============================================================================


def detect_years_in_data(sales: Sequence[SalesRecord]) -> float:
    """
    Years covered by the sales records.

    Uses the inclusive month span between the earliest and latest dated sale
    ("2024-01".."2024-12" is exactly 1.0). Never less than one month (1/12).

    Returns:
        Span in years, or 1.0 when no sale carries a usable date
    """
    months = [m for m in (extract_month(s.salesDate) for s in sales) if m is not None]
    if not months:
        return 1.0

    span = month_span(min(months), max(months))
    if span is None:
        return 1.0
    return max(span / 12, 1 / 12)


def compute_avg_profit_margin(
    org_profit: Sequence[OrgProfitRecord],
    default: float = DEFAULT_PROFIT_MARGIN,
) -> float:
    """
    Portfolio gross margin as a fraction: sum(grossProfit) / sum(sales).

    Clamped to [-0.5, 1.0]. Falls back to default when there are no P&L
    records or total actual sales is zero.
    """
    if not org_profit:
        logger.debug(f"No organization P&L records, using default margin {default}")
        return default

    total_sales = sum(r.sales.actual for r in org_profit)
    total_gross_profit = sum(r.grossProfit.actual for r in org_profit)

    if total_sales == 0:
        logger.debug(f"Organization P&L has zero sales, using default margin {default}")
        return default

    return clamp(total_gross_profit / total_sales, MARGIN_FLOOR, MARGIN_CEILING)


@dataclass
class _CustomerSales:
    name: str = ""
    total_sales: float = 0.0
    count: int = 0


def _aggregate_customer_sales(sales: Sequence[SalesRecord]) -> Dict[str, _CustomerSales]:
    customers: Dict[str, _CustomerSales] = {}
    for record in sales:
        code = record.customerCode.strip()
        if not code:
            continue
        entry = customers.setdefault(code, _CustomerSales())
        entry.total_sales += record.amount
        entry.count += 1
        # Last non-blank name in input order wins
        if record.customerName.strip():
            entry.name = record.customerName
    return customers


# =============================================================================
# CLV
# =============================================================================


def compute_clv(
    sales: Sequence[SalesRecord],
    org_profit: Sequence[OrgProfitRecord],
    years_in_data: Optional[float] = None,
    base_lifespan_years: float = BASE_LIFESPAN_YEARS,
    default_margin: float = DEFAULT_PROFIT_MARGIN,
) -> List[ClvResult]:
    """
    Calculate Customer Lifetime Value for every customer in the sales data.

    Args:
        sales: Sales records; rows without a customer code are ignored
        org_profit: Organization P&L used for the portfolio margin
        years_in_data: Observation window in years. Detected from the sales
            dates when omitted.
        base_lifespan_years: Retention horizon of a customer buying at or
            above the average frequency
        default_margin: Margin used when the P&L cannot provide one

    Returns:
        ClvResult per customer, sorted descending by clv
    """
    customers = _aggregate_customer_sales(sales)
    if not customers:
        return []

    years = years_in_data if years_in_data and years_in_data > 0 else detect_years_in_data(sales)
    margin = compute_avg_profit_margin(org_profit, default=default_margin)

    frequencies = {code: entry.count / years for code, entry in customers.items()}
    avg_frequency = mean(list(frequencies.values()))

    results: List[ClvResult] = []
    for code, entry in customers.items():
        frequency = frequencies[code]
        avg_value = safe_divide(entry.total_sales, entry.count)
        customer_value = avg_value * frequency

        if avg_frequency > 0:
            retention = min(1.0, frequency / avg_frequency) * RETENTION_SCALE + RETENTION_FLOOR
        else:
            retention = RETENTION_FALLBACK
        lifespan = base_lifespan_years * retention

        clv = customer_value * margin * lifespan

        results.append(
            ClvResult(
                customer=code,
                customerName=entry.name,
                transactionCount=entry.count,
                currentSales=entry.total_sales,
                avgTransactionValue=avg_value,
                purchaseFrequency=frequency,
                customerValue=customer_value,
                avgProfitMargin=margin,
                estimatedLifespan=lifespan,
                clv=clv,
                clvToSalesRatio=clv / entry.total_sales if entry.total_sales > 0 else 0.0,
            )
        )

    results.sort(key=lambda r: r.clv, reverse=True)

    logger.info(
        f"CLV computed for {len(results)} customers over {years:.2f} years "
        f"(margin {margin:.3f})"
    )
    return results


def compute_clv_summary(results: Sequence[ClvResult]) -> ClvSummary:
    """Total, mean and top CLV; expects results sorted descending by clv."""
    if not results:
        return ClvSummary()

    total = sum(r.clv for r in results)
    return ClvSummary(
        totalClv=total,
        avgClv=total / len(results),
        topCustomerClv=results[0].clv,
        customerCount=len(results),
    )
