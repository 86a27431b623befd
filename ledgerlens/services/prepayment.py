"""
Prepayment Analysis Service

Isolates prepayments (cash received before the related revenue is
recognized) from gross collections.

Three independent aggregations over collection records:
1. Summary: total raw / booked prepayment, prepayment-to-sales ratio and the
   number of organizations that received any prepayment
2. Per organization, descending by prepayment (blank org -> "unclassified")
3. Per month, ascending
"""

from dataclasses import dataclass
from typing import List, Sequence, Set

from ledgerlens.models.records import CollectionRecord
from ledgerlens.models.schemas import MonthlyPrepayment, OrgPrepayment, PrepaymentSummary
from ledgerlens.services.aggregation import KeyedAccumulator, extract_month, safe_percentage
from ledgerlens.services.org_matching import normalize_org_name

UNCLASSIFIED_ORG: str = "unclassified"


@dataclass
class _PrepaymentTotals:
    prepayment: float = 0.0
    book_prepayment: float = 0.0
    count: int = 0


def compute_prepayment_summary(
    collections: Sequence[CollectionRecord],
    total_sales: float,
) -> PrepaymentSummary:
    """
    Portfolio-level prepayment totals.

    Args:
        collections: Collection records
        total_sales: Revenue base for the ratio (usually the sum of the
            sales records covering the same period)

    Returns:
        PrepaymentSummary. prepaymentToSalesRatio uses the raw prepayment
        amount and is 0 when total_sales is 0. orgCount counts distinct
        non-blank organizations with at least one nonzero prepayment.
    """
    total_prepayment = 0.0
    total_book_prepayment = 0.0
    orgs: Set[str] = set()

    for row in collections:
        total_prepayment += row.prepayment
        total_book_prepayment += row.bookedPrepayment
        org = normalize_org_name(row.org)
        if org and (row.prepayment != 0 or row.bookedPrepayment != 0):
            orgs.add(org)

    return PrepaymentSummary(
        totalPrepayment=total_prepayment,
        totalBookPrepayment=total_book_prepayment,
        prepaymentToSalesRatio=safe_percentage(total_prepayment, total_sales),
        orgCount=len(orgs),
    )


def compute_org_prepayments(collections: Sequence[CollectionRecord]) -> List[OrgPrepayment]:
    """
    Prepayments per organization, sorted descending by raw prepayment.

    Every collection row is counted, including rows without a prepayment.
    Blank organization names are grouped under "unclassified".
    """
    by_org: KeyedAccumulator[str, _PrepaymentTotals] = KeyedAccumulator(_PrepaymentTotals)

    for row in collections:
        org = normalize_org_name(row.org) or UNCLASSIFIED_ORG
        entry = by_org.get(org)
        entry.prepayment += row.prepayment
        entry.book_prepayment += row.bookedPrepayment
        entry.count += 1

    results = [
        OrgPrepayment(
            org=org,
            prepayment=totals.prepayment,
            bookPrepayment=totals.book_prepayment,
            collectionCount=totals.count,
        )
        for org, totals in by_org.items()
    ]
    results.sort(key=lambda r: r.prepayment, reverse=True)
    return results


def compute_monthly_prepayments(collections: Sequence[CollectionRecord]) -> List[MonthlyPrepayment]:
    """Prepayments per collection month, ascending; undated rows are skipped."""
    by_month: KeyedAccumulator[str, _PrepaymentTotals] = KeyedAccumulator(_PrepaymentTotals)

    for row in collections:
        month = extract_month(row.collectionDate)
        if month is None:
            continue
        entry = by_month.get(month)
        entry.prepayment += row.prepayment
        entry.book_prepayment += row.bookedPrepayment

    return [
        MonthlyPrepayment(
            month=month,
            prepayment=totals.prepayment,
            bookPrepayment=totals.book_prepayment,
        )
        for month, totals in sorted(by_month.items(), key=lambda item: item[0])
    ]
