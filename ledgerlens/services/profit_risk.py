"""
Profitability x Risk Matrix Service

Places each organization on a 2x2 grid of operating margin against
receivable risk.

Risk Score (0-100):
    Share of the organization's booked receivables that has aged past two
    months (buckets month3..month6 plus overdue):

        riskScore = 100 * sum(month3..overdue) / sum(total)

    0 when the organization's total receivable is not positive.

Quadrants (a benchmark value itself counts as high profit and as low risk):
                      risk <= 40       risk > 40
    margin >= 5%      star             problem_child
    margin <  5%      cash_cow         dog

The P&L names organizations by team ("... Team") while the aging and sales
extracts use the sales organization, so both joins go through fuzzy_match.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Sequence

from ledgerlens.models.enums import AgingBucket, Quadrant, RiskGrade
from ledgerlens.models.records import OrgProfitRecord, ReceivableAgingRecord, SalesRecord
from ledgerlens.models.schemas import ProfitRiskData, QuadrantSummary
from ledgerlens.services.aggregation import KeyedAccumulator, clamp, safe_percentage, sum_by_key
from ledgerlens.services.org_matching import fuzzy_match, normalize_org_name

logger = logging.getLogger(__name__)

# =============================================================================
# Constants
# =============================================================================

MARGIN_BENCHMARK: float = 5.0
RISK_BENCHMARK: float = 40.0

RISK_GRADE_MEDIUM_CUTOFF: float = 30.0
RISK_GRADE_HIGH_CUTOFF: float = 60.0

LONG_TERM_BUCKETS = (
    AgingBucket.MONTH3,
    AgingBucket.MONTH4,
    AgingBucket.MONTH5,
    AgingBucket.MONTH6,
    AgingBucket.OVERDUE,
)

# (quadrant, label, recommendation) in presentation order
QUADRANT_DEFINITIONS = (
    (Quadrant.STAR, "Star", "Core organization: expand investment and sustain performance"),
    (Quadrant.CASH_COW, "Stable", "Improve margin through cost reduction and higher value-added mix"),
    (Quadrant.PROBLEM_CHILD, "Needs Attention", "Tighten receivable management and review credit limits"),
    (Quadrant.DOG, "At Risk", "Pursue margin improvement and receivable collection together"),
)


@dataclass
class OrgRiskScore:
    """Aging-derived risk of one organization."""
    risk_score: float
    receivables: float


# =============================================================================
# Classification
# =============================================================================


def classify_risk_grade(
    risk_score: float,
    medium_cutoff: float = RISK_GRADE_MEDIUM_CUTOFF,
    high_cutoff: float = RISK_GRADE_HIGH_CUTOFF,
) -> RiskGrade:
    """Grade a 0-100 risk score: >= high_cutoff high, >= medium_cutoff medium."""
    if risk_score >= high_cutoff:
        return RiskGrade.HIGH
    if risk_score >= medium_cutoff:
        return RiskGrade.MEDIUM
    return RiskGrade.LOW


def classify_quadrant(
    profit_margin: float,
    risk_score: float,
    margin_benchmark: float = MARGIN_BENCHMARK,
    risk_benchmark: float = RISK_BENCHMARK,
) -> Quadrant:
    """
    Classify an organization into one of the four quadrants.

    Both boundaries fall on the favorable side: a margin exactly at the
    benchmark counts as high profit and a risk score exactly at the
    benchmark counts as low risk, so (5.0, 40.0) is a star.
    """
    high_profit = profit_margin >= margin_benchmark
    high_risk = risk_score > risk_benchmark

    if high_profit and not high_risk:
        return Quadrant.STAR
    if not high_profit and not high_risk:
        return Quadrant.CASH_COW
    if high_profit and high_risk:
        return Quadrant.PROBLEM_CHILD
    return Quadrant.DOG


# =============================================================================
# Per-Organization Inputs
# =============================================================================


def compute_org_risk_scores(records: Sequence[ReceivableAgingRecord]) -> Dict[str, OrgRiskScore]:
    """
    Risk score and total receivable per organization.

    Rows with a blank organization are ignored. Keys keep first-seen order,
    which decides fuzzy-match precedence downstream.
    """
    by_org: KeyedAccumulator[str, List[float]] = KeyedAccumulator(lambda: [0.0, 0.0])

    for record in records:
        org = normalize_org_name(record.org)
        if not org:
            continue
        entry = by_org.get(org)
        entry[0] += record.total.bookedAmount
        entry[1] += sum(getattr(record, bucket.value).bookedAmount for bucket in LONG_TERM_BUCKETS)

    scores: Dict[str, OrgRiskScore] = {}
    for org, (total, long_term) in by_org.items():
        score = safe_percentage(long_term, total) if total > 0 else 0.0
        scores[org] = OrgRiskScore(risk_score=clamp(score, 0.0, 100.0), receivables=total)
    return scores


def compute_org_sales(sales: Sequence[SalesRecord]) -> Dict[str, float]:
    """Summed sales amount per non-blank organization."""
    return sum_by_key(sales, lambda r: normalize_org_name(r.org), lambda r: r.amount)


# =============================================================================
# Matrix
# =============================================================================


def compute_profit_risk_matrix(
    org_profit: Sequence[OrgProfitRecord],
    receivable_aging: Sequence[ReceivableAgingRecord],
    sales: Sequence[SalesRecord],
    margin_benchmark: float = MARGIN_BENCHMARK,
    risk_benchmark: float = RISK_BENCHMARK,
    medium_cutoff: float = RISK_GRADE_MEDIUM_CUTOFF,
    high_cutoff: float = RISK_GRADE_HIGH_CUTOFF,
) -> List[ProfitRiskData]:
    """
    Cross operating margin with receivable risk per organization team.

    Only P&L rows with a non-blank team and nonzero actual sales are placed.
    Risk falls back to 0 (no receivables) and sales fall back to the P&L
    row's own actual sales when fuzzy matching finds no counterpart.

    Args:
        org_profit: Organization P&L; operatingMargin.actual is the margin
        receivable_aging: Aging rows for the risk scores
        sales: Sales rows for the sales totals
        margin_benchmark: Margin (%) at or above which a team is high profit
        risk_benchmark: Risk score above which a team is high risk
        medium_cutoff: Risk grade medium threshold
        high_cutoff: Risk grade high threshold

    Returns:
        One ProfitRiskData per eligible P&L row, in input order
    """
    risk_by_org = compute_org_risk_scores(receivable_aging)
    sales_by_org = compute_org_sales(sales)

    matrix: List[ProfitRiskData] = []
    for record in org_profit:
        team = normalize_org_name(record.orgTeam)
        if not team or record.sales.actual == 0:
            continue

        risk = fuzzy_match(risk_by_org, team)
        risk_score = risk.risk_score if risk is not None else 0.0
        receivables = risk.receivables if risk is not None else 0.0
        org_sales = fuzzy_match(sales_by_org, team, default=record.sales.actual)
        margin = record.operatingMargin.actual

        matrix.append(
            ProfitRiskData(
                name=team,
                profitMargin=margin,
                riskScore=risk_score,
                riskGrade=classify_risk_grade(risk_score, medium_cutoff, high_cutoff),
                sales=org_sales,
                receivables=receivables,
                quadrant=classify_quadrant(margin, risk_score, margin_benchmark, risk_benchmark),
            )
        )

    logger.info(f"Profit-risk matrix placed {len(matrix)} of {len(org_profit)} organizations")
    return matrix


def compute_quadrant_summary(data: Sequence[ProfitRiskData]) -> List[QuadrantSummary]:
    """Count and sales per quadrant, always all four in fixed order."""
    summaries: List[QuadrantSummary] = []
    for quadrant, label, recommendation in QUADRANT_DEFINITIONS:
        members = [d for d in data if d.quadrant == quadrant]
        summaries.append(
            QuadrantSummary(
                name=quadrant,
                label=label,
                count=len(members),
                totalSales=sum(d.sales for d in members),
                recommendation=recommendation,
            )
        )
    return summaries
