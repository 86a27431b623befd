"""
FastAPI router module for profitability endpoints.

This module implements endpoints for:
- 3-way variance analysis (price / volume / mix) of plan vs actual revenue
- Profitability x receivable risk matrix with quadrant summary
- Price x volume sensitivity grid with optional narrative insight
- What-if scenarios on organization P&L
- Single-lever sensitivity sweeps

Business benchmarks (margin / risk benchmarks, risk grade cut points,
default sensitivity steps) are read from settings so a deployment can tune
them without code changes.
"""

import logging
from typing import List

from fastapi import APIRouter, HTTPException

from ledgerlens.core.dependencies import SettingsDep
from ledgerlens.models import (
    ProfitRiskMatrix,
    ProfitRiskRequest,
    SensitivityGridRequest,
    SensitivityGridResponse,
    SensitivityPoint,
    SensitivitySweepRequest,
    VarianceAnalysisResult,
    VarianceRequest,
    WhatIfRequest,
    WhatIfResponse,
)
from ledgerlens.services.profit_risk import compute_profit_risk_matrix, compute_quadrant_summary
from ledgerlens.services.sensitivity import compute_sensitivity_grid, generate_sensitivity_insight
from ledgerlens.services.variance import compute_variance_analysis
from ledgerlens.services.what_if import (
    compute_scenario_summary,
    compute_sensitivity_sweep,
    compute_what_if_scenario,
)

# Configure logging
logger = logging.getLogger(__name__)

# Create router with prefix and tags for OpenAPI documentation
router = APIRouter(prefix="/profitability", tags=["profitability"])


# =============================================================================
# Variance Analysis
# =============================================================================


@router.post("/variance", response_model=VarianceAnalysisResult)
async def variance_endpoint(request: VarianceRequest) -> VarianceAnalysisResult:
    """
    Decompose plan-vs-actual revenue into price, volume and mix variance.

    Lines with no plan and no actual quantity are skipped, new trades
    (no plan quantity) are tracked but not decomposed, and lost trades (no
    actual quantity) are tracked and decomposed.

    Args:
        request: Profitability analysis rows

    Returns:
        VarianceAnalysisResult with items, totals, org rollups and coverage

    Raises:
        HTTPException 500: If the computation fails
    """
    try:
        return compute_variance_analysis(request.records)
    except Exception as e:
        logger.error(f"Error computing variance analysis: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=f"Error computing variance analysis: {str(e)}",
        )


# =============================================================================
# Profitability x Risk
# =============================================================================


@router.post("/profit-risk", response_model=ProfitRiskMatrix)
async def profit_risk_endpoint(
    request: ProfitRiskRequest,
    settings: SettingsDep,
) -> ProfitRiskMatrix:
    """
    Cross operating margin with receivable risk per organization.

    Args:
        request: Org P&L, receivable aging and sales records
        settings: Injected settings supplying benchmarks and grade cut points

    Returns:
        ProfitRiskMatrix with the placed organizations and all four
        quadrant summaries

    Raises:
        HTTPException 500: If the computation fails
    """
    try:
        items = compute_profit_risk_matrix(
            request.orgProfit,
            request.receivableAging,
            request.sales,
            margin_benchmark=settings.profit_margin_benchmark,
            risk_benchmark=settings.risk_score_benchmark,
            medium_cutoff=settings.risk_grade_medium_cutoff,
            high_cutoff=settings.risk_grade_high_cutoff,
        )
        return ProfitRiskMatrix(items=items, quadrants=compute_quadrant_summary(items))
    except Exception as e:
        logger.error(f"Error computing profit-risk matrix: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=f"Error computing profit-risk matrix: {str(e)}",
        )


# =============================================================================
# Sensitivity & What-If
# =============================================================================


@router.post("/sensitivity-grid", response_model=SensitivityGridResponse)
async def sensitivity_grid_endpoint(
    request: SensitivityGridRequest,
    settings: SettingsDep,
) -> SensitivityGridResponse:
    """
    Price x volume sensitivity grid.

    Step lists default to SENSITIVITY_STEPS. When insightMetric is set the
    response also carries a narrative reading of the grid for that metric.

    Raises:
        HTTPException 500: If the computation fails
    """
    try:
        price_steps = request.priceSteps if request.priceSteps is not None else settings.sensitivity_steps
        volume_steps = request.volumeSteps if request.volumeSteps is not None else settings.sensitivity_steps

        result = compute_sensitivity_grid(
            request.baseSales,
            request.baseGrossProfit,
            request.baseOpProfit,
            price_steps=price_steps,
            volume_steps=volume_steps,
        )
        insight = None
        if request.insightMetric is not None:
            insight = generate_sensitivity_insight(result, request.insightMetric)

        return SensitivityGridResponse(result=result, insight=insight)
    except Exception as e:
        logger.error(f"Error computing sensitivity grid: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=f"Error computing sensitivity grid: {str(e)}",
        )


@router.post("/what-if", response_model=WhatIfResponse)
async def what_if_endpoint(request: WhatIfRequest) -> WhatIfResponse:
    """
    Apply a what-if scenario to every organization.

    Returns:
        WhatIfResponse with results sorted by operating profit delta
        (largest first) and the portfolio summary

    Raises:
        HTTPException 500: If the computation fails
    """
    try:
        results = compute_what_if_scenario(request.orgProfit, request.params)
        return WhatIfResponse(results=results, summary=compute_scenario_summary(results))
    except Exception as e:
        logger.error(f"Error computing what-if scenario: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=f"Error computing what-if scenario: {str(e)}",
        )


@router.post("/sensitivity-sweep", response_model=List[SensitivityPoint])
async def sensitivity_sweep_endpoint(request: SensitivitySweepRequest) -> List[SensitivityPoint]:
    """
    Sweep one scenario lever and report portfolio operating profit.

    Raises:
        HTTPException 500: If the computation fails
    """
    try:
        return compute_sensitivity_sweep(request.orgProfit, request.parameter, request.valueRange)
    except Exception as e:
        logger.error(f"Error computing sensitivity sweep: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=f"Error computing sensitivity sweep: {str(e)}",
        )
