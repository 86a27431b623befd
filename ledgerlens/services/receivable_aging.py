"""
Receivable Aging Detail Service

Per-customer aging profiles, currency exposure, invoice-vs-book gaps and the
portfolio weighted-average receivable age.

Weighted Age:
    Each aging bucket is represented by its midpoint in days. The weight of a
    bucket is the ABSOLUTE booked amount it holds, so a credit memo sitting in
    one bucket cannot cancel the weight of a receivable in another (the
    amounts still net in the totals).

        weightedDays = sum(|amount_b| * midpoint_b) / sum(|amount_b|)

    0 when every bucket is empty.

Invoice-vs-Book Gap:
    gapAmount = invoiced total - booked total
    gapRatio  = gapAmount / booked total * 100   (0 when booked total is 0)
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence, Set, Tuple

from ledgerlens.models.enums import AgingBucket
from ledgerlens.models.records import AgingAmounts, ReceivableAgingRecord
from ledgerlens.models.schemas import (
    CurrencyExposure,
    CustomerAgingProfile,
    OrgInvoiceBookGap,
    WeightedAgingSummary,
)
from ledgerlens.services.aggregation import KeyedAccumulator, group_by, safe_divide, safe_percentage
from ledgerlens.services.org_matching import normalize_org_name

logger = logging.getLogger(__name__)

# =============================================================================
# Constants
# =============================================================================

# Midpoint of each aging band in days; overdue (> 6 months) is pinned at 270.
BUCKET_MIDPOINTS: Dict[AgingBucket, float] = {
    AgingBucket.MONTH1: 15.0,
    AgingBucket.MONTH2: 45.0,
    AgingBucket.MONTH3: 75.0,
    AgingBucket.MONTH4: 105.0,
    AgingBucket.MONTH5: 135.0,
    AgingBucket.MONTH6: 165.0,
    AgingBucket.OVERDUE: 270.0,
}

DEFAULT_CURRENCY: str = "KRW"
UNASSIGNED_ORG: str = "unassigned"


def bucket_amounts(record: ReceivableAgingRecord) -> List[Tuple[AgingBucket, AgingAmounts]]:
    """The seven aging buckets of a record, youngest first."""
    return [(bucket, getattr(record, bucket.value)) for bucket in AgingBucket]


def weighted_average_days(
    amounts: Mapping[AgingBucket, float],
    midpoints: Optional[Mapping[AgingBucket, float]] = None,
) -> Tuple[float, float]:
    """
    Absolute-amount weighted average of bucket midpoints.

    Args:
        amounts: Booked amount per bucket (may be negative)
        midpoints: Day midpoints per bucket; defaults to BUCKET_MIDPOINTS

    Returns:
        Tuple of (weighted days, total absolute amount). Weighted days is 0
        when the total absolute amount is 0.
    """
    table = midpoints or BUCKET_MIDPOINTS
    weighted_sum = 0.0
    amount_sum = 0.0
    for bucket, amount in amounts.items():
        weight = abs(amount)
        if weight > 0:
            weighted_sum += weight * table[bucket]
            amount_sum += weight
    return safe_divide(weighted_sum, amount_sum), amount_sum


# =============================================================================
# Customer Aging Profile
# =============================================================================


def compute_customer_aging_profile(
    records: Sequence[ReceivableAgingRecord],
    midpoints: Optional[Mapping[AgingBucket, float]] = None,
    default_currency: str = DEFAULT_CURRENCY,
) -> List[CustomerAgingProfile]:
    """
    Aggregate aging rows per customer code.

    Descriptive fields (name, rep, organization, currency) come from the
    customer's first row. Bucket fields are summed booked amounts; bookTotal
    is the summed total booked amount, invoicedTotal the summed bucket
    invoiced amounts. Rows without a customer code are ignored.

    Args:
        records: Aging snapshot rows
        midpoints: Optional override of the bucket midpoint table
        default_currency: Currency used when the first row has none

    Returns:
        One profile per customer, sorted descending by bookTotal.
    """
    profiles: List[CustomerAgingProfile] = []
    for code, rows in group_by(records, lambda r: r.customerCode.strip()).items():
        buckets: Dict[AgingBucket, float] = {bucket: 0.0 for bucket in AgingBucket}
        invoiced_total = 0.0
        for record in rows:
            for bucket, amounts in bucket_amounts(record):
                buckets[bucket] += amounts.bookedAmount
                invoiced_total += amounts.invoicedAmount
        book_total = sum(r.total.bookedAmount for r in rows)

        weighted_days, _ = weighted_average_days(buckets, midpoints)
        gap = invoiced_total - book_total
        first = rows[0]
        profiles.append(
            CustomerAgingProfile(
                customerCode=code,
                customerName=first.customerName,
                rep=first.rep,
                org=first.org,
                currency=first.currency.strip() or default_currency,
                month1=buckets[AgingBucket.MONTH1],
                month2=buckets[AgingBucket.MONTH2],
                month3=buckets[AgingBucket.MONTH3],
                month4=buckets[AgingBucket.MONTH4],
                month5=buckets[AgingBucket.MONTH5],
                month6=buckets[AgingBucket.MONTH6],
                overdue=buckets[AgingBucket.OVERDUE],
                bookTotal=book_total,
                invoicedTotal=invoiced_total,
                gapAmount=gap,
                gapRatio=safe_percentage(gap, book_total),
                weightedDays=weighted_days,
            )
        )

    profiles.sort(key=lambda p: p.bookTotal, reverse=True)
    return profiles


# =============================================================================
# Currency Exposure
# =============================================================================


@dataclass
class _CurrencyTotals:
    booked: float = 0.0
    invoiced: float = 0.0
    customers: Set[str] = field(default_factory=set)


def compute_currency_exposure(
    records: Sequence[ReceivableAgingRecord],
    default_currency: str = DEFAULT_CURRENCY,
) -> List[CurrencyExposure]:
    """
    Receivable exposure per currency, sorted descending by booked amount.

    share is the currency's booked total as a percentage of the booked total
    across all currencies (0 when that grand total is not positive).
    """
    by_currency: KeyedAccumulator[str, _CurrencyTotals] = KeyedAccumulator(_CurrencyTotals)

    for record in records:
        currency = record.currency.strip() or default_currency
        entry = by_currency.get(currency)
        entry.booked += record.total.bookedAmount
        entry.invoiced += record.total.invoicedAmount
        entry.customers.add(record.customerCode)

    total_booked = sum(entry.booked for entry in by_currency.values())

    exposures = [
        CurrencyExposure(
            currency=currency,
            bookedAmount=entry.booked,
            invoicedAmount=entry.invoiced,
            share=safe_percentage(entry.booked, total_booked) if total_booked > 0 else 0.0,
            customerCount=len(entry.customers),
        )
        for currency, entry in by_currency.items()
    ]
    exposures.sort(key=lambda e: e.bookedAmount, reverse=True)
    return exposures


# =============================================================================
# Organization Invoice-vs-Book Gap
# =============================================================================


def compute_org_invoice_book_gap(records: Sequence[ReceivableAgingRecord]) -> List[OrgInvoiceBookGap]:
    """
    Invoiced vs booked receivables per organization.

    Sorted descending by the absolute gap, so large negative gaps rank
    alongside large positive ones. Blank organizations are grouped under
    "unassigned".
    """
    by_org: KeyedAccumulator[str, List[float]] = KeyedAccumulator(lambda: [0.0, 0.0])

    for record in records:
        org = normalize_org_name(record.org) or UNASSIGNED_ORG
        entry = by_org.get(org)
        entry[0] += record.total.invoicedAmount
        entry[1] += record.total.bookedAmount

    gaps = [
        OrgInvoiceBookGap(
            org=org,
            invoicedTotal=invoiced,
            bookTotal=booked,
            gapAmount=invoiced - booked,
            gapRatio=safe_percentage(invoiced - booked, booked),
        )
        for org, (invoiced, booked) in by_org.items()
    ]
    gaps.sort(key=lambda g: abs(g.gapAmount), reverse=True)
    return gaps


# =============================================================================
# Portfolio Weighted Aging
# =============================================================================


def compute_weighted_aging_days(
    records: Sequence[ReceivableAgingRecord],
    midpoints: Optional[Mapping[AgingBucket, float]] = None,
) -> WeightedAgingSummary:
    """
    Weighted average receivable age across every row, without grouping.

    Each row's buckets contribute their own absolute amounts, so opposite
    signed amounts in different rows do not cancel.
    """
    table = midpoints or BUCKET_MIDPOINTS
    weighted_sum = 0.0
    total_amount = 0.0

    for record in records:
        for bucket, amounts in bucket_amounts(record):
            weight = abs(amounts.bookedAmount)
            if weight > 0:
                weighted_sum += weight * table[bucket]
                total_amount += weight

    logger.debug(f"Weighted aging over {len(records)} rows, absolute total {total_amount:,.0f}")

    return WeightedAgingSummary(
        weightedAvgDays=safe_divide(weighted_sum, total_amount),
        totalAmount=total_amount,
    )
