"""
Variance Analysis Service - 3-way (price / volume / mix) decomposition

Explains the gap between planned and actual revenue for each
(organization, customer, product) line.

Row classification (quantities compared against exactly zero):
    plan == 0, actual == 0  -> skipped (no activity, counted for coverage only)
    plan == 0, actual != 0  -> new trade (actual amount tracked separately,
                               NOT decomposed: there is no plan price)
    plan != 0, actual == 0  -> lost trade (plan amount tracked separately AND
                               decomposed: the whole gap lands in volume)
    otherwise               -> decomposed

Decomposition:
    planPrice      = planAmount / planQty          (0 when planQty == 0)
    actualPrice    = actualAmount / actualQty      (0 when actualQty == 0)
    totalVariance  = actualAmount - planAmount
    priceVariance  = (actualPrice - planPrice) * actualQty
    volumeVariance = (actualQty - planQty) * planPrice
    mixVariance    = totalVariance - priceVariance - volumeVariance

mixVariance is the residual, so price + volume + mix always reconciles to the
total. For a lost trade actualQty is 0, which makes priceVariance exactly 0.

Coverage:
    analysisRate = (decomposed rows + new trades) / total rows * 100
"""

import logging
from typing import List, Sequence

from ledgerlens.models.records import ProfitabilityAnalysisRecord
from ledgerlens.models.schemas import (
    OrgVarianceSummary,
    VarianceAnalysisResult,
    VarianceItem,
    VarianceSummary,
)
from ledgerlens.services.aggregation import KeyedAccumulator, safe_divide, safe_percentage
from ledgerlens.services.org_matching import normalize_org_name

logger = logging.getLogger(__name__)


def decompose_row(record: ProfitabilityAnalysisRecord, is_lost_trade: bool = False) -> VarianceItem:
    """
    Split one line's plan-vs-actual revenue gap into price, volume and mix.

    Args:
        record: Profitability line with plan/actual quantity and amount
        is_lost_trade: Flag carried onto the item for lines that stopped
            trading (plan quantity without actual quantity)

    Returns:
        VarianceItem whose price + volume + mix equals totalVariance
    """
    plan_qty = record.quantity.plan
    actual_qty = record.quantity.actual
    plan_amount = record.salesAmount.plan
    actual_amount = record.salesAmount.actual

    plan_price = safe_divide(plan_amount, plan_qty)
    actual_price = safe_divide(actual_amount, actual_qty)

    total_variance = actual_amount - plan_amount
    price_variance = (actual_price - plan_price) * actual_qty
    volume_variance = (actual_qty - plan_qty) * plan_price
    mix_variance = total_variance - price_variance - volume_variance

    return VarianceItem(
        org=record.orgTeam,
        customer=record.customer,
        product=record.product,
        planQty=plan_qty,
        actualQty=actual_qty,
        planAmount=plan_amount,
        actualAmount=actual_amount,
        planPrice=plan_price,
        actualPrice=actual_price,
        totalVariance=total_variance,
        priceVariance=price_variance,
        volumeVariance=volume_variance,
        mixVariance=mix_variance,
        isLostTrade=is_lost_trade,
    )


def compute_variance_summary(items: Sequence[VarianceItem]) -> VarianceSummary:
    """Sum the four variance figures over decomposed items."""
    return VarianceSummary(
        totalVariance=sum(item.totalVariance for item in items),
        priceVariance=sum(item.priceVariance for item in items),
        volumeVariance=sum(item.volumeVariance for item in items),
        mixVariance=sum(item.mixVariance for item in items),
        itemCount=len(items),
    )


def compute_org_variance_summaries(items: Sequence[VarianceItem]) -> List[OrgVarianceSummary]:
    """
    Roll decomposed items up per organization.

    Items with a blank organization are left out. Sorted descending by the
    absolute total variance so the largest swings come first whatever their
    sign.
    """
    by_org: KeyedAccumulator[str, List[float]] = KeyedAccumulator(lambda: [0.0, 0.0, 0.0, 0.0])

    for item in items:
        org = normalize_org_name(item.org)
        if not org:
            continue
        sums = by_org.get(org)
        sums[0] += item.totalVariance
        sums[1] += item.priceVariance
        sums[2] += item.volumeVariance
        sums[3] += item.mixVariance

    summaries = [
        OrgVarianceSummary(
            org=org,
            totalVariance=total,
            priceVariance=price,
            volumeVariance=volume,
            mixVariance=mix,
        )
        for org, (total, price, volume, mix) in by_org.items()
    ]
    summaries.sort(key=lambda s: abs(s.totalVariance), reverse=True)
    return summaries


def compute_variance_analysis(records: Sequence[ProfitabilityAnalysisRecord]) -> VarianceAnalysisResult:
    """
    Classify and decompose profitability lines.

    Args:
        records: Profitability analysis lines

    Returns:
        VarianceAnalysisResult. skippedRows + newTradeCount + len(items)
        always equals totalRows; lost trades are included in items.
    """
    items: List[VarianceItem] = []
    new_trade_amount = 0.0
    new_trade_count = 0
    lost_trade_amount = 0.0
    lost_trade_count = 0
    skipped = 0

    for record in records:
        plan_qty = record.quantity.plan
        actual_qty = record.quantity.actual

        if plan_qty == 0 and actual_qty == 0:
            skipped += 1
            continue

        if plan_qty == 0:
            new_trade_amount += record.salesAmount.actual
            new_trade_count += 1
            continue

        is_lost_trade = actual_qty == 0
        if is_lost_trade:
            lost_trade_amount += record.salesAmount.plan
            lost_trade_count += 1

        items.append(decompose_row(record, is_lost_trade=is_lost_trade))

    total_rows = len(records)
    analysis_rate = safe_percentage(len(items) + new_trade_count, total_rows)

    logger.info(
        f"Variance analysis: {len(items)} decomposed, {new_trade_count} new, "
        f"{lost_trade_count} lost, {skipped} skipped of {total_rows} rows"
    )

    return VarianceAnalysisResult(
        items=items,
        summary=compute_variance_summary(items),
        orgSummaries=compute_org_variance_summaries(items),
        newTradeAmount=new_trade_amount,
        newTradeCount=new_trade_count,
        lostTradeAmount=lost_trade_amount,
        lostTradeCount=lost_trade_count,
        skippedRows=skipped,
        totalRows=total_rows,
        analysisRate=analysis_rate,
    )
