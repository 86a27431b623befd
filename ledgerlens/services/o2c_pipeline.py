"""
O2C (Order-to-Cash) Pipeline Service

Stages the funnel from booked order through revenue recognition to cash
collection, and tracks month-over-month conversion and collection rates.

Funnel (fixed order):
    order -> revenue_conversion -> net_collection -> outstanding

Definitions:
- grossCollections = sum of collectedAmount
- prepaymentAmount = sum of bookedPrepayment
- netCollections   = grossCollections - prepaymentAmount
  Prepayments are cash received ahead of revenue, so they are removed before
  comparing collections with recognized sales. Net can be negative.
- outstanding      = max(0, totalSales - netCollections)
  Over-collection reports as zero outstanding, never as a negative balance.

Every stage percentage is relative to total orders and is 0 when total
orders is 0.
"""

import logging
from dataclasses import dataclass
from typing import List, Sequence

from ledgerlens.models.enums import O2CStageName
from ledgerlens.models.records import CollectionRecord, OrderRecord, SalesRecord
from ledgerlens.models.schemas import MonthlyConversion, O2CPipelineResult, O2CStage
from ledgerlens.services.aggregation import KeyedAccumulator, extract_month, safe_percentage

logger = logging.getLogger(__name__)


def net_collection(record: CollectionRecord) -> float:
    """Collection amount with the booked prepayment removed."""
    return record.collectedAmount - record.bookedPrepayment


# =============================================================================
# Funnel
# =============================================================================


def compute_o2c_pipeline(
    orders: Sequence[OrderRecord],
    sales: Sequence[SalesRecord],
    collections: Sequence[CollectionRecord],
) -> O2CPipelineResult:
    """
    Compute the four-stage order-to-cash funnel.

    Args:
        orders: Booked order records
        sales: Recognized revenue records
        collections: Cash receipt records (gross, including prepayments)

    Returns:
        O2CPipelineResult with the stages in funnel order and the totals
        they were computed from.

    Example:
        >>> result = compute_o2c_pipeline(
        ...     [OrderRecord(amount=1000)],
        ...     [SalesRecord(amount=800)],
        ...     [CollectionRecord(collectedAmount=600, bookedPrepayment=100)],
        ... )
        >>> result.outstanding
        300.0
    """
    total_orders = sum(o.amount for o in orders)
    total_sales = sum(s.amount for s in sales)
    gross_collections = sum(c.collectedAmount for c in collections)
    prepayment_amount = sum(c.bookedPrepayment for c in collections)
    net_collections = gross_collections - prepayment_amount
    outstanding = max(0.0, total_sales - net_collections)

    stage_inputs = [
        (O2CStageName.ORDER, total_orders, len(orders)),
        (O2CStageName.REVENUE_CONVERSION, total_sales, len(sales)),
        (O2CStageName.NET_COLLECTION, net_collections, len(collections)),
        (O2CStageName.OUTSTANDING, outstanding, 0),
    ]

    stages = [
        O2CStage(
            stage=name,
            amount=amount,
            percentage=safe_percentage(amount, total_orders),
            count=count,
        )
        for name, amount, count in stage_inputs
    ]

    return O2CPipelineResult(
        stages=stages,
        totalOrders=total_orders,
        totalSales=total_sales,
        grossCollections=gross_collections,
        prepaymentAmount=prepayment_amount,
        netCollections=net_collections,
        outstanding=outstanding,
    )


# =============================================================================
# Monthly Conversion
# =============================================================================


@dataclass
class _MonthTotals:
    orders: float = 0.0
    sales: float = 0.0
    collections: float = 0.0


def compute_monthly_conversion(
    orders: Sequence[OrderRecord],
    sales: Sequence[SalesRecord],
    collections: Sequence[CollectionRecord],
) -> List[MonthlyConversion]:
    """
    Monthly order / revenue / net collection with conversion rates.

    Each record is bucketed by its own date (order date, sales date,
    collection date); there is no shared transaction date. A month appears
    if any of the three inputs has a dated row in it. Rows without a usable
    date are skipped.

    Rates:
        conversionRate = sales / orders * 100        (0 when orders == 0)
        collectionRate = net collection / sales * 100 (0 when sales == 0)

    Returns:
        Rows sorted ascending by month.
    """
    months: KeyedAccumulator[str, _MonthTotals] = KeyedAccumulator(_MonthTotals)
    undated = 0

    for order in orders:
        month = extract_month(order.orderDate)
        if month is None:
            undated += 1
            continue
        months.get(month).orders += order.amount

    for sale in sales:
        month = extract_month(sale.salesDate)
        if month is None:
            undated += 1
            continue
        months.get(month).sales += sale.amount

    for collection in collections:
        month = extract_month(collection.collectionDate)
        if month is None:
            undated += 1
            continue
        months.get(month).collections += net_collection(collection)

    if undated:
        logger.debug(f"Monthly conversion skipped {undated} rows without a usable date")

    return [
        MonthlyConversion(
            month=month,
            orders=totals.orders,
            sales=totals.sales,
            collections=totals.collections,
            conversionRate=safe_percentage(totals.sales, totals.orders),
            collectionRate=safe_percentage(totals.collections, totals.sales),
        )
        for month, totals in sorted(months.items(), key=lambda item: item[0])
    ]
