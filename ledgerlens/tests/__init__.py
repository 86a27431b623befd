'''
Ledger Lens Backend Test Suite

This module provides test coverage for the analytics services and the
FastAPI routers.

Test Modules:
-------------
- test_aggregation.py: Keyed accumulator, month extraction, guarded math
- test_org_matching.py: Fuzzy organization matching and filtering
  - Key contains candidate / candidate contains key
  - Empty selection returns every row

- test_o2c_pipeline.py: O2C funnel and monthly conversion
  - Outstanding never negative
  - Stage percentages zero-guarded

- test_prepayment.py: Prepayment summary, org and monthly breakdowns
- test_receivable_aging.py: Aging profiles, weighted days bounds, gaps
- test_variance.py: 3-way variance decomposition
  - Skipped / new / lost / decomposed partition
  - price + volume + mix reconciles to total

- test_clv.py: Customer lifetime value
  - customerValue == totalSales / yearsInData

- test_profit_risk.py: Risk scores, quadrant boundaries
- test_sensitivity.py: Sensitivity grid base-case identity, insight
- test_what_if.py: What-if scenarios and single-lever sweeps
- test_decomposition.py: Trend / seasonal / residual decomposition
  - Seasonal index has zero mean
  - Synthetic seasonal series recovers its pattern

- test_api.py: Router contract tests via FastAPI TestClient

Running Tests:
--------------
    pip install -e ".[test]"
    pytest ledgerlens/tests/ -v

Configuration:
--------------
See conftest.py for shared fixtures and test configuration.
'''

# All tests live in the individual modules
# This file enables pytest discovery of the tests directory

__all__ = []
