"""
Input record models for the Ledger Lens analytics services.

These models describe the typed record collections produced by the ingestion
layer (spreadsheet parsing lives outside this package). The services treat
every record as a read-only snapshot, so the models are frozen.

Field names are camelCase so the same names appear in Python, in JSON request
bodies, and in the dashboard code that consumes the results.

Record families:
- OrderRecord: booked orders
- SalesRecord: recognized revenue per customer
- CollectionRecord: cash receipts including prepayments
- ReceivableAgingRecord: receivable snapshot split into aging buckets
- OrgProfitRecord: plan/actual P&L per organization team
- ProfitabilityAnalysisRecord: plan/actual quantity and revenue per
  (organization, customer, product)
- MonthlyValue: one point of a monthly series
"""

from datetime import date, datetime
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

# Raw date cell as delivered by ingestion: ISO-ish strings, slash dates,
# compact YYYYMMDD strings, spreadsheet serial numbers, or real dates.
RawDate = Optional[Union[datetime, date, str, float]]


class _Record(BaseModel):
    """Base for immutable input records."""
    model_config = ConfigDict(frozen=True, extra='ignore')


# =============================================================================
# Paired Value Types
# =============================================================================


class PlanActual(_Record):
    """A paired plan/actual figure."""
    plan: float = Field(default=0.0, description="Planned value")
    actual: float = Field(default=0.0, description="Actual value")


class AgingAmounts(_Record):
    """Booked and invoiced (shipped) amount held in one aging bucket."""
    bookedAmount: float = Field(default=0.0, description="Amount on the books")
    invoicedAmount: float = Field(default=0.0, description="Invoiced / shipped amount")


# =============================================================================
# Transaction Records
# =============================================================================


class OrderRecord(_Record):
    """A booked order line."""
    orderDate: RawDate = None
    org: str = ""
    amount: float = 0.0


class SalesRecord(_Record):
    """A recognized revenue line."""
    salesDate: RawDate = None
    org: str = ""
    customerCode: str = ""
    customerName: str = ""
    amount: float = 0.0


class CollectionRecord(_Record):
    """
    A cash receipt.

    collectedAmount is the gross booked collection and already includes
    bookedPrepayment. Net collection (gross minus prepayment) can be
    negative when prepayments are reclassified after the fact.
    """
    collectionDate: RawDate = None
    org: str = ""
    collectedAmount: float = Field(default=0.0, description="Gross booked collection amount")
    bookedPrepayment: float = Field(default=0.0, description="Booked prepayment amount")
    prepayment: float = Field(default=0.0, description="Raw prepayment amount before conversion")


class ReceivableAgingRecord(_Record):
    """
    One customer line of a receivable aging snapshot.

    total is expected to equal the sum of the seven buckets but the services
    never rely on it: some read the buckets, some read the total.
    """
    customerCode: str = ""
    customerName: str = ""
    rep: str = ""
    org: str = ""
    currency: str = ""
    month1: AgingAmounts = Field(default_factory=AgingAmounts)
    month2: AgingAmounts = Field(default_factory=AgingAmounts)
    month3: AgingAmounts = Field(default_factory=AgingAmounts)
    month4: AgingAmounts = Field(default_factory=AgingAmounts)
    month5: AgingAmounts = Field(default_factory=AgingAmounts)
    month6: AgingAmounts = Field(default_factory=AgingAmounts)
    overdue: AgingAmounts = Field(default_factory=AgingAmounts)
    total: AgingAmounts = Field(default_factory=AgingAmounts)


# =============================================================================
# Profitability Records
# =============================================================================


class OrgProfitRecord(_Record):
    """
    Plan/actual P&L for an organization team.

    costRate and operatingMargin are percentages (e.g. 72.5 means 72.5%).
    """
    orgTeam: str = ""
    sales: PlanActual = Field(default_factory=PlanActual)
    costRate: PlanActual = Field(default_factory=PlanActual)
    grossProfit: PlanActual = Field(default_factory=PlanActual)
    sga: PlanActual = Field(default_factory=PlanActual)
    operatingProfit: PlanActual = Field(default_factory=PlanActual)
    operatingMargin: PlanActual = Field(default_factory=PlanActual)


class ProfitabilityAnalysisRecord(_Record):
    """Plan/actual quantity and revenue for one (org, customer, product)."""
    orgTeam: str = ""
    customer: str = ""
    product: str = ""
    quantity: PlanActual = Field(default_factory=PlanActual)
    salesAmount: PlanActual = Field(default_factory=PlanActual)


# =============================================================================
# Series
# =============================================================================


class MonthlyValue(_Record):
    """A single point of a monthly series keyed by YYYY-MM."""
    month: str
    value: float = 0.0
