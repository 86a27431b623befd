"""
Enumeration definitions for the Ledger Lens backend.

All enums inherit from both `str` and `Enum` to ensure JSON serialization
compatibility with Pydantic models, enabling automatic serialization and
deserialization in API responses.

Small closed sets of labels are modelled here instead of free-form strings so
that callers (and the OpenAPI schema) see every legal value up front.
"""

from enum import Enum


class O2CStageName(str, Enum):
    """
    Order-to-cash funnel stages, in funnel order.

    - order: Booked orders (always the 100% reference stage)
    - revenue_conversion: Orders recognized as revenue
    - net_collection: Cash collected, net of prepayments
    - outstanding: Revenue not yet collected (never negative)
    """
    ORDER = "order"
    REVENUE_CONVERSION = "revenue_conversion"
    NET_COLLECTION = "net_collection"
    OUTSTANDING = "outstanding"


class AgingBucket(str, Enum):
    """
    Receivable aging bands, youngest first.

    month1..month6 are consecutive 30-day bands; overdue is everything
    older than six months.
    """
    MONTH1 = "month1"
    MONTH2 = "month2"
    MONTH3 = "month3"
    MONTH4 = "month4"
    MONTH5 = "month5"
    MONTH6 = "month6"
    OVERDUE = "overdue"


class RiskGrade(str, Enum):
    """
    Collection risk grade derived from the long-term receivable share.

    - low: score below the medium cutoff (default 30)
    - medium: score at or above the medium cutoff
    - high: score at or above the high cutoff (default 60)
    """
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Quadrant(str, Enum):
    """
    Profitability x risk quadrant.

    - star: high profit, low risk
    - cash_cow: low profit, low risk
    - problem_child: high profit, high risk
    - dog: low profit, high risk
    """
    STAR = "star"
    CASH_COW = "cash_cow"
    PROBLEM_CHILD = "problem_child"
    DOG = "dog"


class TrendDirection(str, Enum):
    """Direction of the decomposed trend component."""
    UP = "up"
    DOWN = "down"
    FLAT = "flat"


class SweepParameter(str, Enum):
    """
    Scenario lever varied by a single-axis sensitivity sweep.

    - sales: salesChangePercent
    - cost: costRateChangePoints
    - sga: sgaChangePercent
    """
    SALES = "sales"
    COST = "cost"
    SGA = "sga"


class SensitivityMetric(str, Enum):
    """Grid metric a sensitivity insight is written for."""
    SALES = "sales"
    GROSS_PROFIT = "gp"
    OPERATING_PROFIT = "op"


class DominantFactor(str, Enum):
    """Which lever moves a metric more at +/-10%."""
    PRICE = "price"
    VOLUME = "volume"
    BALANCED = "balanced"
