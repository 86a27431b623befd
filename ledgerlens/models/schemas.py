"""
Pydantic result and request models for the Ledger Lens backend.

This module provides type-safe serialization for every derived metric the
analytics services return, plus the request bodies accepted by the HTTP
routers. Result models are plain data aggregates: formatting (currency,
percentages), charting and label localization are left to the consumer.

Result families:
- O2C pipeline and monthly conversion
- Prepayment summary, organization and monthly breakdowns
- Receivable aging profiles, currency exposure, invoice-vs-book gaps
- 3-way variance analysis (price / volume / mix)
- Customer lifetime value
- Profitability x risk matrix
- Sensitivity grid, what-if scenarios, single-axis sweeps
- Additive time-series decomposition

All models use Pydantic v2 syntax.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ledgerlens.models.enums import (
    DominantFactor,
    O2CStageName,
    Quadrant,
    RiskGrade,
    SensitivityMetric,
    SweepParameter,
    TrendDirection,
)
from ledgerlens.models.records import (
    CollectionRecord,
    MonthlyValue,
    OrderRecord,
    OrgProfitRecord,
    ProfitabilityAnalysisRecord,
    ReceivableAgingRecord,
    SalesRecord,
)


# =============================================================================
# O2C Pipeline Models
# =============================================================================


class O2CStage(BaseModel):
    """
    One stage of the order-to-cash funnel.

    percentage is relative to total orders and is 0 (never NaN) when total
    orders is 0.
    """
    stage: O2CStageName
    amount: float
    percentage: float
    count: int


class O2CPipelineResult(BaseModel):
    """Funnel stages plus the collection totals they were derived from."""
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "stages": [
                    {"stage": "order", "amount": 1000.0, "percentage": 100.0, "count": 4},
                    {"stage": "revenue_conversion", "amount": 800.0, "percentage": 80.0, "count": 3},
                    {"stage": "net_collection", "amount": 500.0, "percentage": 50.0, "count": 2},
                    {"stage": "outstanding", "amount": 300.0, "percentage": 30.0, "count": 0},
                ],
                "totalOrders": 1000.0,
                "totalSales": 800.0,
                "grossCollections": 600.0,
                "prepaymentAmount": 100.0,
                "netCollections": 500.0,
                "outstanding": 300.0,
            }
        }
    )

    stages: List[O2CStage]
    totalOrders: float
    totalSales: float
    grossCollections: float
    prepaymentAmount: float
    netCollections: float
    outstanding: float = Field(..., ge=0.0, description="max(0, totalSales - netCollections)")


class MonthlyConversion(BaseModel):
    """
    Order, revenue and net collection for one calendar month.

    conversionRate = sales / orders * 100
    collectionRate = collections / sales * 100
    """
    month: str
    orders: float = 0.0
    sales: float = 0.0
    collections: float = Field(default=0.0, description="Net collection (gross - prepayment)")
    conversionRate: float = 0.0
    collectionRate: float = 0.0


# =============================================================================
# Prepayment Models
# =============================================================================


class PrepaymentSummary(BaseModel):
    """Portfolio-wide prepayment totals."""
    totalPrepayment: float = 0.0
    totalBookPrepayment: float = 0.0
    prepaymentToSalesRatio: float = 0.0
    orgCount: int = 0


class OrgPrepayment(BaseModel):
    """Prepayments received by one organization."""
    org: str
    prepayment: float
    bookPrepayment: float
    collectionCount: int


class MonthlyPrepayment(BaseModel):
    """Prepayments received in one calendar month."""
    month: str
    prepayment: float
    bookPrepayment: float


# =============================================================================
# Receivable Aging Models
# =============================================================================


class CustomerAgingProfile(BaseModel):
    """
    Aging profile for one customer, summed across all of its rows.

    Bucket fields hold booked amounts. gapAmount is invoiced minus booked;
    weightedDays is the absolute-amount weighted average of bucket midpoints.
    """
    customerCode: str
    customerName: str = ""
    rep: str = ""
    org: str = ""
    currency: str = ""
    month1: float = 0.0
    month2: float = 0.0
    month3: float = 0.0
    month4: float = 0.0
    month5: float = 0.0
    month6: float = 0.0
    overdue: float = 0.0
    bookTotal: float = 0.0
    invoicedTotal: float = 0.0
    gapAmount: float = 0.0
    gapRatio: float = 0.0
    weightedDays: float = 0.0


class CurrencyExposure(BaseModel):
    """Receivable exposure in one currency."""
    currency: str
    bookedAmount: float
    invoicedAmount: float
    share: float = Field(..., description="Share of total booked receivables, %")
    customerCount: int


class OrgInvoiceBookGap(BaseModel):
    """Invoiced vs booked receivables for one organization."""
    org: str
    invoicedTotal: float
    bookTotal: float
    gapAmount: float
    gapRatio: float


class WeightedAgingSummary(BaseModel):
    """Portfolio-wide weighted average receivable age."""
    weightedAvgDays: float = 0.0
    totalAmount: float = Field(default=0.0, description="Sum of absolute bucket amounts")


# =============================================================================
# Variance Analysis Models
# =============================================================================


class VarianceItem(BaseModel):
    """
    Price / volume / mix decomposition for one (org, customer, product).

    priceVariance + volumeVariance + mixVariance == totalVariance by
    construction (mix is the residual).
    """
    org: str
    customer: str
    product: str
    planQty: float
    actualQty: float
    planAmount: float
    actualAmount: float
    planPrice: float
    actualPrice: float
    totalVariance: float
    priceVariance: float
    volumeVariance: float
    mixVariance: float
    isLostTrade: bool = False


class VarianceSummary(BaseModel):
    """Variance components summed across decomposed items."""
    totalVariance: float = 0.0
    priceVariance: float = 0.0
    volumeVariance: float = 0.0
    mixVariance: float = 0.0
    itemCount: int = 0


class OrgVarianceSummary(BaseModel):
    """Variance components summed per organization."""
    org: str
    totalVariance: float
    priceVariance: float
    volumeVariance: float
    mixVariance: float


class VarianceAnalysisResult(BaseModel):
    """
    Full variance analysis over a set of profitability rows.

    skippedRows + newTradeCount + len(items) == totalRows, where items
    already include the lost trades.
    """
    items: List[VarianceItem] = Field(default_factory=list)
    summary: VarianceSummary = Field(default_factory=VarianceSummary)
    orgSummaries: List[OrgVarianceSummary] = Field(default_factory=list)
    newTradeAmount: float = 0.0
    newTradeCount: int = 0
    lostTradeAmount: float = 0.0
    lostTradeCount: int = 0
    skippedRows: int = 0
    totalRows: int = 0
    analysisRate: float = 0.0


# =============================================================================
# Customer Lifetime Value Models
# =============================================================================


class ClvResult(BaseModel):
    """Lifetime value estimate for one customer."""
    customer: str
    customerName: str = ""
    transactionCount: int
    currentSales: float
    avgTransactionValue: float
    purchaseFrequency: float = Field(..., description="Transactions per year")
    customerValue: float = Field(..., description="Annual value: avg transaction x frequency")
    avgProfitMargin: float
    estimatedLifespan: float = Field(..., description="Estimated retention, years")
    clv: float
    clvToSalesRatio: float


class ClvSummary(BaseModel):
    """Portfolio CLV statistics."""
    totalClv: float = 0.0
    avgClv: float = 0.0
    topCustomerClv: float = 0.0
    customerCount: int = 0


# =============================================================================
# Profitability x Risk Models
# =============================================================================


class ProfitRiskData(BaseModel):
    """One organization placed on the profitability x risk matrix."""
    name: str
    profitMargin: float
    riskScore: float = Field(..., ge=0.0, le=100.0)
    riskGrade: RiskGrade
    sales: float
    receivables: float
    quadrant: Quadrant


class QuadrantSummary(BaseModel):
    """Count and sales of the organizations in one quadrant."""
    name: Quadrant
    label: str
    count: int
    totalSales: float
    recommendation: str


# =============================================================================
# Sensitivity & What-If Models
# =============================================================================


class SensitivityCell(BaseModel):
    """Outcome of one (price change %, volume change %) combination."""
    priceChange: float
    volumeChange: float
    resultSales: float
    resultGrossProfit: float
    resultOpProfit: float
    salesChange: float
    gpChange: float
    opChange: float


class SensitivityResult(BaseModel):
    """Price x volume grid, price-major order."""
    baseSales: float
    baseGrossProfit: float
    baseOpProfit: float
    grid: List[SensitivityCell]
    priceRange: List[float]
    volumeRange: List[float]


class SensitivityInsight(BaseModel):
    """Narrative reading of a sensitivity grid for one metric."""
    metric: SensitivityMetric
    dominantFactor: DominantFactor
    priceImpact10: float
    volumeImpact10: float
    priceDrop10Impact: float
    recommendation: str
    riskWarning: str
    balancePoint: Optional[str] = None


class ScenarioParams(BaseModel):
    """
    What-if levers.

    salesChangePercent and sgaChangePercent are multiplicative percentages;
    costRateChangePoints is added to the cost rate in percentage points.
    """
    salesChangePercent: float = 0.0
    costRateChangePoints: float = 0.0
    sgaChangePercent: float = 0.0


class ScenarioResult(BaseModel):
    """Base vs scenario P&L for one organization."""
    org: str
    baseSales: float
    baseGrossProfit: float
    baseOperatingProfit: float
    baseOperatingMargin: float
    scenarioSales: float
    scenarioGrossProfit: float
    scenarioOperatingProfit: float
    scenarioOperatingMargin: float
    salesDelta: float
    grossProfitDelta: float
    operatingProfitDelta: float
    marginDelta: float


class ScenarioSummary(BaseModel):
    """Portfolio totals and blended margins, base vs scenario."""
    baseTotalSales: float = 0.0
    baseTotalOperatingProfit: float = 0.0
    baseAvgMargin: float = 0.0
    scenarioTotalSales: float = 0.0
    scenarioTotalOperatingProfit: float = 0.0
    scenarioAvgMargin: float = 0.0


class SensitivityPoint(BaseModel):
    """Portfolio operating result for one value of a swept lever."""
    paramValue: float
    operatingProfit: float
    operatingMargin: float


# =============================================================================
# Time-Series Decomposition Models
# =============================================================================


class DecompositionPoint(BaseModel):
    """original == trend + seasonal + residual for one month."""
    month: str
    original: float
    trend: float
    seasonal: float
    residual: float


class SeasonalFactor(BaseModel):
    """Seasonal index entry; monthIndex is 1 (January) to 12 (December)."""
    monthIndex: int = Field(..., ge=1, le=12)
    factor: float


class DecompositionResult(BaseModel):
    """Additive decomposition of a monthly series."""
    points: List[DecompositionPoint] = Field(default_factory=list)
    seasonalPattern: List[SeasonalFactor] = Field(default_factory=list)
    trendDirection: TrendDirection = TrendDirection.FLAT
    seasonalStrength: float = Field(default=0.0, ge=0.0, le=1.0)


# =============================================================================
# Request Models (HTTP routers)
# =============================================================================


class O2CRequest(BaseModel):
    """Record collections needed by the O2C endpoints."""
    orders: List[OrderRecord] = Field(default_factory=list)
    sales: List[SalesRecord] = Field(default_factory=list)
    collections: List[CollectionRecord] = Field(default_factory=list)


class ClvRequest(BaseModel):
    """Sales and org profit records for CLV estimation."""
    sales: List[SalesRecord] = Field(default_factory=list)
    orgProfit: List[OrgProfitRecord] = Field(default_factory=list)
    yearsInData: Optional[float] = Field(default=None, gt=0.0)


class ClvAnalysis(BaseModel):
    """Per-customer CLV plus the portfolio summary."""
    results: List[ClvResult]
    summary: ClvSummary


class DecompositionRequest(BaseModel):
    """
    Monthly series to decompose.

    Either series or sales may be supplied; when series is empty the sales
    records are bucketed by month first.
    """
    series: List[MonthlyValue] = Field(default_factory=list)
    sales: List[SalesRecord] = Field(default_factory=list)
    period: Optional[int] = Field(default=None, ge=2)


class PrepaymentRequest(BaseModel):
    """Collections plus the sales base used for the prepayment ratio."""
    collections: List[CollectionRecord] = Field(default_factory=list)
    sales: List[SalesRecord] = Field(default_factory=list)


class PrepaymentAnalysis(BaseModel):
    """Combined prepayment response."""
    summary: PrepaymentSummary
    byOrg: List[OrgPrepayment]
    byMonth: List[MonthlyPrepayment]


class AgingRequest(BaseModel):
    """Receivable aging snapshot rows."""
    records: List[ReceivableAgingRecord] = Field(default_factory=list)


class VarianceRequest(BaseModel):
    """Profitability analysis rows for variance decomposition."""
    records: List[ProfitabilityAnalysisRecord] = Field(default_factory=list)


class ProfitRiskRequest(BaseModel):
    """Inputs for the profitability x risk matrix."""
    orgProfit: List[OrgProfitRecord] = Field(default_factory=list)
    receivableAging: List[ReceivableAgingRecord] = Field(default_factory=list)
    sales: List[SalesRecord] = Field(default_factory=list)


class ProfitRiskMatrix(BaseModel):
    """Matrix rows plus the per-quadrant summary."""
    items: List[ProfitRiskData]
    quadrants: List[QuadrantSummary]


class SensitivityGridRequest(BaseModel):
    """Base P&L and optional custom step lists (percent)."""
    baseSales: float
    baseGrossProfit: float
    baseOpProfit: float
    priceSteps: Optional[List[float]] = None
    volumeSteps: Optional[List[float]] = None
    insightMetric: Optional[SensitivityMetric] = None


class SensitivityGridResponse(BaseModel):
    """Grid plus an optional narrative insight."""
    result: SensitivityResult
    insight: Optional[SensitivityInsight] = None


class WhatIfRequest(BaseModel):
    """Org P&L records and the scenario levers to apply."""
    orgProfit: List[OrgProfitRecord] = Field(default_factory=list)
    params: ScenarioParams = Field(default_factory=ScenarioParams)


class WhatIfResponse(BaseModel):
    """Per-organization scenario results plus the portfolio summary."""
    results: List[ScenarioResult]
    summary: ScenarioSummary


class SensitivitySweepRequest(BaseModel):
    """Single-lever sweep over a list of values."""
    orgProfit: List[OrgProfitRecord] = Field(default_factory=list)
    parameter: SweepParameter
    valueRange: List[float] = Field(default_factory=list)
