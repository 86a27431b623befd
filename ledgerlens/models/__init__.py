"""
Package initialization file for Ledger Lens models.

This module exports all Pydantic records, result schemas and enumerations,
making them importable from ledgerlens.models directly:

    from ledgerlens.models import (
        SalesRecord,
        OrgProfitRecord,
        ClvResult,
        Quadrant,
        # ... etc
    )
"""

# =============================================================================
# Enums
# =============================================================================

from ledgerlens.models.enums import (
    AgingBucket,
    DominantFactor,
    O2CStageName,
    Quadrant,
    RiskGrade,
    SensitivityMetric,
    SweepParameter,
    TrendDirection,
)

# =============================================================================
# Input Records
# =============================================================================

from ledgerlens.models.records import (
    AgingAmounts,
    CollectionRecord,
    MonthlyValue,
    OrderRecord,
    OrgProfitRecord,
    PlanActual,
    ProfitabilityAnalysisRecord,
    RawDate,
    ReceivableAgingRecord,
    SalesRecord,
)

# =============================================================================
# Result and Request Schemas
# =============================================================================

from ledgerlens.models.schemas import (
    # O2C
    O2CStage,
    O2CPipelineResult,
    MonthlyConversion,
    # Prepayment
    PrepaymentSummary,
    OrgPrepayment,
    MonthlyPrepayment,
    # Receivable aging
    CustomerAgingProfile,
    CurrencyExposure,
    OrgInvoiceBookGap,
    WeightedAgingSummary,
    # Variance
    VarianceItem,
    VarianceSummary,
    OrgVarianceSummary,
    VarianceAnalysisResult,
    # CLV
    ClvResult,
    ClvSummary,
    # Profit x risk
    ProfitRiskData,
    QuadrantSummary,
    # Sensitivity & what-if
    SensitivityCell,
    SensitivityResult,
    SensitivityInsight,
    ScenarioParams,
    ScenarioResult,
    ScenarioSummary,
    SensitivityPoint,
    # Decomposition
    DecompositionPoint,
    SeasonalFactor,
    DecompositionResult,
    # Requests / composite responses
    O2CRequest,
    ClvRequest,
    ClvAnalysis,
    DecompositionRequest,
    PrepaymentRequest,
    PrepaymentAnalysis,
    AgingRequest,
    VarianceRequest,
    ProfitRiskRequest,
    ProfitRiskMatrix,
    SensitivityGridRequest,
    SensitivityGridResponse,
    WhatIfRequest,
    WhatIfResponse,
    SensitivitySweepRequest,
)

__all__ = [
    # ----- Enums -----
    'AgingBucket',
    'DominantFactor',
    'O2CStageName',
    'Quadrant',
    'RiskGrade',
    'SensitivityMetric',
    'SweepParameter',
    'TrendDirection',
    # ----- Records -----
    'AgingAmounts',
    'CollectionRecord',
    'MonthlyValue',
    'OrderRecord',
    'OrgProfitRecord',
    'PlanActual',
    'ProfitabilityAnalysisRecord',
    'RawDate',
    'ReceivableAgingRecord',
    'SalesRecord',
    # ----- Results -----
    'O2CStage',
    'O2CPipelineResult',
    'MonthlyConversion',
    'PrepaymentSummary',
    'OrgPrepayment',
    'MonthlyPrepayment',
    'CustomerAgingProfile',
    'CurrencyExposure',
    'OrgInvoiceBookGap',
    'WeightedAgingSummary',
    'VarianceItem',
    'VarianceSummary',
    'OrgVarianceSummary',
    'VarianceAnalysisResult',
    'ClvResult',
    'ClvSummary',
    'ProfitRiskData',
    'QuadrantSummary',
    'SensitivityCell',
    'SensitivityResult',
    'SensitivityInsight',
    'ScenarioParams',
    'ScenarioResult',
    'ScenarioSummary',
    'SensitivityPoint',
    'DecompositionPoint',
    'SeasonalFactor',
    'DecompositionResult',
    # ----- Requests -----
    'O2CRequest',
    'ClvRequest',
    'ClvAnalysis',
    'DecompositionRequest',
    'PrepaymentRequest',
    'PrepaymentAnalysis',
    'AgingRequest',
    'VarianceRequest',
    'ProfitRiskRequest',
    'ProfitRiskMatrix',
    'SensitivityGridRequest',
    'SensitivityGridResponse',
    'WhatIfRequest',
    'WhatIfResponse',
    'SensitivitySweepRequest',
]
