"""
Ledger Lens API package initialization.

This package contains FastAPI router modules for the Ledger Lens backend:
- sales: O2C pipeline, monthly conversion, CLV, time-series decomposition
- receivables: Prepayments, aging profiles, currency exposure, gaps
- profitability: Variance, profit x risk matrix, sensitivity, what-if

Each router carries its own prefix; main.py registers them on the app.
"""

# Import router modules
from ledgerlens.api.sales import router as sales_router
from ledgerlens.api.receivables import router as receivables_router
from ledgerlens.api.profitability import router as profitability_router

# Export all routers for selective imports
__all__ = [
    "sales_router",
    "receivables_router",
    "profitability_router",
]
