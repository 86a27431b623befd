"""
FastAPI router module for receivable and prepayment endpoints.

This module implements endpoints for:
- Prepayment analysis (summary, per organization, per month)
- Customer aging profiles with midpoint-weighted age
- Currency exposure of booked receivables
- Invoice-vs-book gaps per organization
- Portfolio weighted-average receivable age
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query

from ledgerlens.core.dependencies import SettingsDep
from ledgerlens.models import (
    AgingRequest,
    CurrencyExposure,
    CustomerAgingProfile,
    OrgInvoiceBookGap,
    PrepaymentAnalysis,
    PrepaymentRequest,
    WeightedAgingSummary,
)
from ledgerlens.services.org_matching import filter_by_org_fuzzy
from ledgerlens.services.prepayment import (
    compute_monthly_prepayments,
    compute_org_prepayments,
    compute_prepayment_summary,
)
from ledgerlens.services.receivable_aging import (
    compute_currency_exposure,
    compute_customer_aging_profile,
    compute_org_invoice_book_gap,
    compute_weighted_aging_days,
)

# Configure logging
logger = logging.getLogger(__name__)

# Create router with prefix and tags for OpenAPI documentation
router = APIRouter(prefix="/receivables", tags=["receivables"])


# =============================================================================
# Prepayments
# =============================================================================


@router.post("/prepayments", response_model=PrepaymentAnalysis)
async def prepayments_endpoint(
    request: PrepaymentRequest,
    orgs: Optional[List[str]] = Query(None, description="Organization filter (fuzzy)"),
) -> PrepaymentAnalysis:
    """
    Prepayment summary with per-organization and monthly breakdowns.

    The prepayment-to-sales ratio uses the summed amount of the supplied
    sales records as its base.

    Args:
        request: Collections and the sales records for the ratio base
        orgs: Optional organization names to restrict the analysis to

    Returns:
        PrepaymentAnalysis (byOrg descending by prepayment, byMonth ascending)

    Raises:
        HTTPException 500: If the computation fails
    """
    try:
        collections = filter_by_org_fuzzy(request.collections, orgs or [])
        sales = filter_by_org_fuzzy(request.sales, orgs or [])
        total_sales = sum(s.amount for s in sales)

        return PrepaymentAnalysis(
            summary=compute_prepayment_summary(collections, total_sales),
            byOrg=compute_org_prepayments(collections),
            byMonth=compute_monthly_prepayments(collections),
        )
    except Exception as e:
        logger.error(f"Error computing prepayment analysis: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=f"Error computing prepayment analysis: {str(e)}",
        )


# =============================================================================
# Aging Detail
# =============================================================================


@router.post("/aging-profile", response_model=List[CustomerAgingProfile])
async def aging_profile_endpoint(
    request: AgingRequest,
    settings: SettingsDep,
) -> List[CustomerAgingProfile]:
    """
    Per-customer aging profile, sorted descending by booked total.

    Raises:
        HTTPException 500: If the computation fails
    """
    try:
        return compute_customer_aging_profile(
            request.records,
            default_currency=settings.default_currency,
        )
    except Exception as e:
        logger.error(f"Error computing aging profiles: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=f"Error computing aging profiles: {str(e)}",
        )


@router.post("/currency-exposure", response_model=List[CurrencyExposure])
async def currency_exposure_endpoint(
    request: AgingRequest,
    settings: SettingsDep,
) -> List[CurrencyExposure]:
    """
    Booked receivables per currency with share of the total.

    Raises:
        HTTPException 500: If the computation fails
    """
    try:
        return compute_currency_exposure(
            request.records,
            default_currency=settings.default_currency,
        )
    except Exception as e:
        logger.error(f"Error computing currency exposure: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=f"Error computing currency exposure: {str(e)}",
        )


@router.post("/org-gap", response_model=List[OrgInvoiceBookGap])
async def org_gap_endpoint(request: AgingRequest) -> List[OrgInvoiceBookGap]:
    """
    Invoice-vs-book gap per organization, largest absolute gap first.

    Raises:
        HTTPException 500: If the computation fails
    """
    try:
        return compute_org_invoice_book_gap(request.records)
    except Exception as e:
        logger.error(f"Error computing invoice-book gap: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=f"Error computing invoice-book gap: {str(e)}",
        )


@router.post("/weighted-days", response_model=WeightedAgingSummary)
async def weighted_days_endpoint(request: AgingRequest) -> WeightedAgingSummary:
    """
    Portfolio weighted-average receivable age in days.

    Raises:
        HTTPException 500: If the computation fails
    """
    try:
        return compute_weighted_aging_days(request.records)
    except Exception as e:
        logger.error(f"Error computing weighted aging days: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=f"Error computing weighted aging days: {str(e)}",
        )
