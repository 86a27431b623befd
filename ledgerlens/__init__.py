"""
Ledger Lens Backend Package.

Financial analytics layer for sales, receivable and profitability data:
order-to-cash funnel, prepayments, receivable aging detail, price/volume/mix
variance, customer lifetime value, profitability x risk matrix, sensitivity
and what-if engine, and time-series decomposition.

Subpackages:
    - api: FastAPI route handlers
    - core: Configuration and dependencies
    - models: Pydantic records, schemas and enums
    - services: Analytics services (pure functions)
"""

__version__ = "1.0.0"
