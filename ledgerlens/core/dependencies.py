"""
FastAPI dependency injection module for the Ledger Lens backend.

Provides reusable FastAPI dependencies so endpoint handlers never reach for
module globals directly. Overriding a dependency is the supported way to swap
configuration in tests:

    app.dependency_overrides[get_settings_dependency] = lambda: custom_settings

Key Dependencies Provided:
- get_settings_dependency: Returns the cached Settings singleton
- SettingsDep: Type alias for injecting Settings into endpoints

Usage:
    @router.post("/profit-risk")
    async def profit_risk(request: ProfitRiskRequest, settings: SettingsDep):
        return compute_profit_risk_matrix(
            ...,
            margin_benchmark=settings.profit_margin_benchmark,
        )
"""

from typing import Annotated

from fastapi import Depends

from ledgerlens.core.config import Settings, get_settings


# =============================================================================
# Settings Dependency
# =============================================================================


def get_settings_dependency() -> Settings:
    """
    Return the Settings singleton instance.

    This is a thin wrapper around get_settings() so FastAPI's dependency
    override mechanism can replace it in tests.

    Returns:
        Settings: The cached Settings instance with all configuration values.
    """
    return get_settings()


# =============================================================================
# Type Aliases for Dependency Injection
# =============================================================================

# Usage: async def endpoint(settings: SettingsDep)
SettingsDep = Annotated[Settings, Depends(get_settings_dependency)]
