"""
Pytest Configuration and Shared Fixtures for Ledger Lens Backend Tests.

This module provides fixtures and configuration for all backend tests, supporting:
- Async endpoint tests with pytest-asyncio
- Sample record collections for every analytics family
- A seasonal monthly series for decomposition tests (numpy)
- A FastAPI TestClient with a settings override hook

Custom markers:
- slow: long-running tests
- parity: tests pinning documented formula behavior to worked examples
"""

from typing import Callable, Generator, List, Optional

import numpy as np
import pytest

from ledgerlens.core.config import Settings, get_settings
from ledgerlens.models import (
    AgingAmounts,
    CollectionRecord,
    MonthlyValue,
    OrderRecord,
    OrgProfitRecord,
    PlanActual,
    ProfitabilityAnalysisRecord,
    ReceivableAgingRecord,
    SalesRecord,
)


# ============================================================
# PYTEST HOOKS
# ============================================================

def pytest_configure(config) -> None:
    """
    Configure custom pytest markers for test organization.

    Custom markers defined:
    - slow: Marks tests as slow (deselect with -m "not slow")
    - parity: Marks tests pinning formulas to hand-computed examples

    Args:
        config: Pytest configuration object
    """
    config.addinivalue_line(
        'markers',
        'slow: marks tests as slow (deselect with -m "not slow")'
    )
    config.addinivalue_line(
        'markers',
        'parity: marks tests pinning formulas to hand-computed examples'
    )


# ============================================================
# RECORD FACTORIES
# ============================================================

def aging_row(
    customer_code: str = 'C001',
    org: str = 'Building Materials',
    currency: str = 'KRW',
    customer_name: str = 'Acme',
    rep: str = 'Kim',
    **buckets: float,
) -> ReceivableAgingRecord:
    """
    Build an aging row from booked bucket amounts.

    Invoiced amounts equal the booked amounts unless passed as
    '<bucket>_invoiced'. total is the sum of the buckets.
    """
    names = ['month1', 'month2', 'month3', 'month4', 'month5', 'month6', 'overdue']
    fields = {}
    booked_total = 0.0
    invoiced_total = 0.0
    for name in names:
        booked = buckets.get(name, 0.0)
        invoiced = buckets.get(f'{name}_invoiced', booked)
        fields[name] = AgingAmounts(bookedAmount=booked, invoicedAmount=invoiced)
        booked_total += booked
        invoiced_total += invoiced
    return ReceivableAgingRecord(
        customerCode=customer_code,
        customerName=customer_name,
        rep=rep,
        org=org,
        currency=currency,
        total=AgingAmounts(bookedAmount=booked_total, invoicedAmount=invoiced_total),
        **fields,
    )


def org_profit(
    team: str,
    sales: float,
    cost_rate: float = 70.0,
    sga: float = 0.0,
    operating_margin: Optional[float] = None,
) -> OrgProfitRecord:
    """Build an org P&L row whose figures are internally consistent."""
    gross_profit = sales - sales * cost_rate / 100
    operating_profit = gross_profit - sga
    margin = operating_margin
    if margin is None:
        margin = operating_profit / sales * 100 if sales else 0.0
    return OrgProfitRecord(
        orgTeam=team,
        sales=PlanActual(plan=sales, actual=sales),
        costRate=PlanActual(plan=cost_rate, actual=cost_rate),
        grossProfit=PlanActual(plan=gross_profit, actual=gross_profit),
        sga=PlanActual(plan=sga, actual=sga),
        operatingProfit=PlanActual(plan=operating_profit, actual=operating_profit),
        operatingMargin=PlanActual(plan=margin, actual=margin),
    )


def profitability_row(
    plan_qty: float,
    actual_qty: float,
    plan_amount: float,
    actual_amount: float,
    org: str = 'Building Materials Team',
    customer: str = 'Acme',
    product: str = 'P-1',
) -> ProfitabilityAnalysisRecord:
    """Build a profitability analysis line."""
    return ProfitabilityAnalysisRecord(
        orgTeam=org,
        customer=customer,
        product=product,
        quantity=PlanActual(plan=plan_qty, actual=actual_qty),
        salesAmount=PlanActual(plan=plan_amount, actual=actual_amount),
    )


@pytest.fixture
def make_aging_row() -> Callable[..., ReceivableAgingRecord]:
    """Factory fixture for aging rows."""
    return aging_row


@pytest.fixture
def make_org_profit() -> Callable[..., OrgProfitRecord]:
    """Factory fixture for org P&L rows."""
    return org_profit


@pytest.fixture
def make_profitability_row() -> Callable[..., ProfitabilityAnalysisRecord]:
    """Factory fixture for profitability analysis lines."""
    return profitability_row


# ============================================================
# SAMPLE COLLECTIONS
# ============================================================

@pytest.fixture
def sample_orders() -> List[OrderRecord]:
    """Orders across two months and two organizations."""
    return [
        OrderRecord(orderDate='2024-01-05', org='Building Materials', amount=1000.0),
        OrderRecord(orderDate='2024-01-20', org='Chemicals', amount=500.0),
        OrderRecord(orderDate='2024/02/03', org='Building Materials', amount=800.0),
    ]


@pytest.fixture
def sample_sales() -> List[SalesRecord]:
    """Sales for three customers over January-March 2024."""
    return [
        SalesRecord(salesDate='2024-01-10', org='Building Materials', customerCode='C001',
                    customerName='Acme', amount=900.0),
        SalesRecord(salesDate='20240125', org='Chemicals', customerCode='C002',
                    customerName='Beta', amount=400.0),
        SalesRecord(salesDate='2024-02-15', org='Building Materials', customerCode='C001',
                    customerName='Acme Corp', amount=700.0),
        SalesRecord(salesDate='2024-03-01', org='Building Materials', customerCode='C003',
                    customerName='Gamma', amount=100.0),
    ]


@pytest.fixture
def sample_collections() -> List[CollectionRecord]:
    """Collections with prepayments for two organizations."""
    return [
        CollectionRecord(collectionDate='2024-01-31', org='Building Materials',
                         collectedAmount=600.0, bookedPrepayment=100.0, prepayment=120.0),
        CollectionRecord(collectionDate='2024-02-28', org='Chemicals',
                         collectedAmount=300.0, bookedPrepayment=0.0, prepayment=0.0),
        CollectionRecord(collectionDate='2024-02-10', org='Building Materials',
                         collectedAmount=500.0, bookedPrepayment=50.0, prepayment=50.0),
    ]


@pytest.fixture
def sample_aging() -> List[ReceivableAgingRecord]:
    """Aging rows for two organizations and two currencies."""
    return [
        aging_row('C001', org='Building Materials', month1=600.0, month2=200.0, month4=200.0),
        aging_row('C002', org='Chemicals', currency='USD', month1=100.0, overdue=300.0),
        aging_row('C001', org='Building Materials', month3=100.0),
    ]


@pytest.fixture
def sample_org_profit() -> List[OrgProfitRecord]:
    """Org P&L labelled by team name."""
    return [
        org_profit('Building Materials Team', sales=10000.0, cost_rate=80.0, sga=1000.0),
        org_profit('Chemicals Team', sales=5000.0, cost_rate=90.0, sga=300.0),
        org_profit('Dormant Team', sales=0.0),
    ]


# ============================================================
# TIME SERIES FIXTURES
# ============================================================

@pytest.fixture
def seasonal_series() -> List[MonthlyValue]:
    """
    Three years of monthly values: linear trend plus a fixed seasonal cycle.

    value = 1000 + 10 * t + 100 * sin(2 * pi * month / 12)
    """
    values = []
    for t in range(36):
        year = 2021 + t // 12
        month = t % 12 + 1
        value = 1000 + 10 * t + 100 * np.sin(2 * np.pi * month / 12)
        values.append(MonthlyValue(month=f'{year}-{month:02d}', value=float(value)))
    return values


# ============================================================
# API FIXTURES
# ============================================================

@pytest.fixture
def client() -> Generator:
    """
    FastAPI TestClient with dependency overrides cleared after each test.
    """
    from fastapi.testclient import TestClient

    from ledgerlens.main import app

    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def default_settings() -> Generator[Settings, None, None]:
    """Fresh Settings instance; the cached singleton is reset around the test."""
    get_settings.cache_clear()
    settings = Settings()
    yield settings
    get_settings.cache_clear()
