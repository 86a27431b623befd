"""
FastAPI router module for sales-side analytics endpoints.

This module implements endpoints for:
- O2C pipeline: order -> revenue -> net collection -> outstanding funnel
- Monthly conversion: per-month order/revenue/net collection rates
- Customer lifetime value with portfolio summary
- Additive time-series decomposition of a monthly series (or of sales
  records bucketed by month)

Every endpoint is a thin adapter: the request body carries already-typed
record collections, the service computes, and the result model is returned
as-is. Organization filters (?orgs=...) use fuzzy organization matching, so
"Building Materials" also selects "Building Materials Team".
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query

from ledgerlens.core.dependencies import SettingsDep
from ledgerlens.models import (
    ClvAnalysis,
    ClvRequest,
    DecompositionRequest,
    DecompositionResult,
    MonthlyConversion,
    O2CPipelineResult,
    O2CRequest,
)
from ledgerlens.services.clv import compute_clv, compute_clv_summary
from ledgerlens.services.decomposition import build_monthly_series, decompose_time_series
from ledgerlens.services.o2c_pipeline import compute_monthly_conversion, compute_o2c_pipeline
from ledgerlens.services.org_matching import filter_by_org_fuzzy

# Configure logging
logger = logging.getLogger(__name__)

# Create router with prefix and tags for OpenAPI documentation
router = APIRouter(prefix="/sales", tags=["sales"])


def _filtered(request: O2CRequest, orgs: Optional[List[str]]) -> O2CRequest:
    """Apply the optional organization filter to every O2C collection."""
    if not orgs:
        return request
    return O2CRequest(
        orders=filter_by_org_fuzzy(request.orders, orgs),
        sales=filter_by_org_fuzzy(request.sales, orgs),
        collections=filter_by_org_fuzzy(request.collections, orgs),
    )


# =============================================================================
# O2C Endpoints
# =============================================================================


@router.post("/o2c-pipeline", response_model=O2CPipelineResult)
async def o2c_pipeline_endpoint(
    request: O2CRequest,
    orgs: Optional[List[str]] = Query(None, description="Organization filter (fuzzy)"),
) -> O2CPipelineResult:
    """
    Compute the four-stage order-to-cash funnel.

    Args:
        request: Orders, sales and collections
        orgs: Optional organization names to restrict the analysis to

    Returns:
        O2CPipelineResult with stages in funnel order. Outstanding is never
        negative; stage percentages are 0 when there are no orders.

    Raises:
        HTTPException 500: If the computation fails
    """
    try:
        data = _filtered(request, orgs)
        return compute_o2c_pipeline(data.orders, data.sales, data.collections)
    except Exception as e:
        logger.error(f"Error computing O2C pipeline: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=f"Error computing O2C pipeline: {str(e)}",
        )


@router.post("/monthly-conversion", response_model=List[MonthlyConversion])
async def monthly_conversion_endpoint(
    request: O2CRequest,
    orgs: Optional[List[str]] = Query(None, description="Organization filter (fuzzy)"),
) -> List[MonthlyConversion]:
    """
    Month-by-month conversion and collection rates, ascending by month.

    Raises:
        HTTPException 500: If the computation fails
    """
    try:
        data = _filtered(request, orgs)
        return compute_monthly_conversion(data.orders, data.sales, data.collections)
    except Exception as e:
        logger.error(f"Error computing monthly conversion: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=f"Error computing monthly conversion: {str(e)}",
        )


# =============================================================================
# Customer Lifetime Value
# =============================================================================


@router.post("/clv", response_model=ClvAnalysis)
async def clv_endpoint(request: ClvRequest, settings: SettingsDep) -> ClvAnalysis:
    """
    Estimate customer lifetime value for every customer in the sales data.

    The base lifespan and fallback margin come from settings
    (CLV_BASE_LIFESPAN_YEARS, CLV_DEFAULT_PROFIT_MARGIN).

    Args:
        request: Sales records, org P&L records and an optional
            observation window in years
        settings: Injected application settings

    Returns:
        ClvAnalysis with results sorted descending by CLV and the summary

    Raises:
        HTTPException 500: If the computation fails
    """
    try:
        results = compute_clv(
            request.sales,
            request.orgProfit,
            years_in_data=request.yearsInData,
            base_lifespan_years=settings.clv_base_lifespan_years,
            default_margin=settings.clv_default_profit_margin,
        )
        return ClvAnalysis(results=results, summary=compute_clv_summary(results))
    except Exception as e:
        logger.error(f"Error computing CLV: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=f"Error computing CLV: {str(e)}",
        )


# =============================================================================
# Time-Series Decomposition
# =============================================================================


@router.post("/decomposition", response_model=DecompositionResult)
async def decomposition_endpoint(
    request: DecompositionRequest,
    settings: SettingsDep,
) -> DecompositionResult:
    """
    Decompose a monthly series into trend, seasonal and residual parts.

    When no explicit series is sent, the sales records are summed per month
    and that series is decomposed. The period defaults to
    DECOMPOSITION_PERIOD. An empty or too-short input yields the empty
    result (no points, flat trend, strength 0).

    Raises:
        HTTPException 500: If the computation fails
    """
    try:
        series = request.series or build_monthly_series(request.sales)
        period = request.period or settings.decomposition_period
        return decompose_time_series(series, period=period)
    except Exception as e:
        logger.error(f"Error decomposing time series: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=f"Error decomposing time series: {str(e)}",
        )
