"""
Ledger Lens Services Module

This module contains the financial analytics services of Ledger Lens.
Every service is a set of pure, synchronous functions over typed record
collections: no I/O, no shared state, and any grouping structure is built
fresh inside each call.

Services:
- aggregation: Keyed accumulation, month bucketing, guarded arithmetic
- org_matching: Organization name reconciliation (fuzzy match / filter)
- o2c_pipeline: Order-to-cash funnel and monthly conversion
- prepayment: Prepayment summary, per-organization and monthly breakdowns
- receivable_aging: Customer aging profiles, currency exposure, gaps
- variance: 3-way price / volume / mix variance decomposition
- clv: Customer lifetime value
- profit_risk: Profitability x receivable risk matrix
- sensitivity: Price x volume sensitivity grid and insight
- what_if: What-if scenarios and single-lever sweeps
- decomposition: Additive trend / seasonal / residual decomposition

All services are consumed by the API layer (ledgerlens/api/) and may be
imported directly for in-process use.
"""

# =============================================================================
# Aggregation Primitives
# Shared keyed accumulator, month extraction and zero-guarded arithmetic
# =============================================================================

from ledgerlens.services.aggregation import (
    KeyedAccumulator,
    group_by,
    sum_by_key,
    extract_month,
    month_of_year,
    month_span,
    safe_divide,
    safe_percentage,
    clamp,
    mean,
)

# =============================================================================
# Organization Matching Exports
# Reconciles sales-organization names with organization-team names by
# exact or containment match
# =============================================================================

from ledgerlens.services.org_matching import (
    normalize_org_name,
    fuzzy_match,
    is_same_org,
    filter_by_org_fuzzy,
)

# =============================================================================
# O2C Pipeline Exports
# Order -> revenue -> net collection -> outstanding funnel and monthly rates
# =============================================================================

from ledgerlens.services.o2c_pipeline import (
    compute_o2c_pipeline,
    compute_monthly_conversion,
    net_collection,
)

# =============================================================================
# Prepayment Exports
# =============================================================================

from ledgerlens.services.prepayment import (
    compute_prepayment_summary,
    compute_org_prepayments,
    compute_monthly_prepayments,
)

# =============================================================================
# Receivable Aging Exports
# Midpoint-weighted aging, currency exposure and invoice-vs-book gaps
# =============================================================================

from ledgerlens.services.receivable_aging import (
    BUCKET_MIDPOINTS,
    compute_customer_aging_profile,
    compute_currency_exposure,
    compute_org_invoice_book_gap,
    compute_weighted_aging_days,
)

# =============================================================================
# Variance Analysis Exports
# =============================================================================

from ledgerlens.services.variance import (
    compute_variance_analysis,
    compute_variance_summary,
    compute_org_variance_summaries,
    decompose_row,
)

# =============================================================================
# Customer Lifetime Value Exports
# =============================================================================

from ledgerlens.services.clv import (
    detect_years_in_data,
    compute_avg_profit_margin,
    compute_clv,
    compute_clv_summary,
)

# =============================================================================
# Profitability x Risk Exports
# =============================================================================

from ledgerlens.services.profit_risk import (
    compute_org_risk_scores,
    compute_org_sales,
    classify_risk_grade,
    classify_quadrant,
    compute_profit_risk_matrix,
    compute_quadrant_summary,
)

# =============================================================================
# Sensitivity & What-If Exports
# =============================================================================

from ledgerlens.services.sensitivity import (
    DEFAULT_STEPS,
    compute_sensitivity_grid,
    generate_sensitivity_insight,
)

from ledgerlens.services.what_if import (
    compute_what_if_scenario,
    compute_scenario_summary,
    compute_sensitivity_sweep,
)

# =============================================================================
# Time-Series Decomposition Exports
# =============================================================================

from ledgerlens.services.decomposition import (
    decompose_time_series,
    build_monthly_series,
)

# =============================================================================
# __all__ - Public API Definition
# All symbols explicitly listed for clean imports via:
#   from ledgerlens.services import <symbol>
# =============================================================================

__all__ = [
    # ----- Aggregation -----
    'KeyedAccumulator',
    'group_by',
    'sum_by_key',
    'extract_month',
    'month_of_year',
    'month_span',
    'safe_divide',
    'safe_percentage',
    'clamp',
    'mean',
    # ----- Organization Matching -----
    'normalize_org_name',
    'fuzzy_match',
    'is_same_org',
    'filter_by_org_fuzzy',
    # ----- O2C Pipeline -----
    'compute_o2c_pipeline',
    'compute_monthly_conversion',
    'net_collection',
    # ----- Prepayment -----
    'compute_prepayment_summary',
    'compute_org_prepayments',
    'compute_monthly_prepayments',
    # ----- Receivable Aging -----
    'BUCKET_MIDPOINTS',
    'compute_customer_aging_profile',
    'compute_currency_exposure',
    'compute_org_invoice_book_gap',
    'compute_weighted_aging_days',
    # ----- Variance -----
    'compute_variance_analysis',
    'compute_variance_summary',
    'compute_org_variance_summaries',
    'decompose_row',
    # ----- CLV -----
    'detect_years_in_data',
    'compute_avg_profit_margin',
    'compute_clv',
    'compute_clv_summary',
    # ----- Profitability x Risk -----
    'compute_org_risk_scores',
    'compute_org_sales',
    'classify_risk_grade',
    'classify_quadrant',
    'compute_profit_risk_matrix',
    'compute_quadrant_summary',
    # ----- Sensitivity & What-If -----
    'DEFAULT_STEPS',
    'compute_sensitivity_grid',
    'generate_sensitivity_insight',
    'compute_what_if_scenario',
    'compute_scenario_summary',
    'compute_sensitivity_sweep',
    # ----- Decomposition -----
    'decompose_time_series',
    'build_monthly_series',
]
