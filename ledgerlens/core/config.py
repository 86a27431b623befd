"""
Settings and environment management module for the Ledger Lens backend.

This module provides centralized configuration management using pydantic-settings,
which automatically loads settings from environment variables and .env files.

Key Features:
- Environment variable validation and type coercion
- Sensible defaults for development
- Singleton pattern via @lru_cache for efficient access
- Business benchmarks used by the analytics services, overridable per deployment

Environment Variables:
- APP_NAME: Display name reported by the API root endpoint
- API_URL: Backend URL for proxy configuration (default: http://localhost:8000)
- LOG_LEVEL: Root logging level for the API process (default: INFO)

Analytics Defaults:
- clv_base_lifespan_years: 3.0 (Baseline customer retention horizon in years)
- clv_default_profit_margin: 0.10 (Margin used when no profit records exist)
- profit_margin_benchmark: 5.0 (Operating margin % separating high/low profit)
- risk_score_benchmark: 40.0 (Risk score separating high/low collection risk)
- risk_grade_medium_cutoff / risk_grade_high_cutoff: 30 / 60
- sensitivity_steps: -20..20 in steps of 5 (price and volume axes)
- decomposition_period: 12 (Months per seasonal cycle)
- default_currency: KRW (Currency assumed for aging rows without one)

Usage:
    from ledgerlens.core.config import get_settings

    settings = get_settings()
    benchmark = settings.profit_margin_benchmark
"""

from functools import lru_cache
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    The class inherits from pydantic-settings BaseSettings which provides:
    - Automatic loading from environment variables (case-insensitive)
    - Support for .env file loading
    - Type validation and coercion
    - Default values for every setting (nothing is required to boot)

    Attributes:
        app_name: Human-readable service name.
        api_url: Public URL of this API, used by the frontend proxy.
        log_level: Logging level name applied in main.py.
        clv_base_lifespan_years: Baseline retention horizon for CLV.
        clv_default_profit_margin: Fallback margin when profit data is missing.
        profit_margin_benchmark: Operating margin (%) at or above which an
            organization counts as high-profit.
        risk_score_benchmark: Risk score above which an organization counts
            as high-risk.
        risk_grade_medium_cutoff: Lowest risk score graded "medium".
        risk_grade_high_cutoff: Lowest risk score graded "high".
        sensitivity_steps: Percentage steps used for both grid axes.
        decomposition_period: Seasonal period (months) for decomposition.
        default_currency: Currency code used when an aging row has none.
    """

    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        extra='ignore',
        case_sensitive=False,
    )

    # =========================================================================
    # Service Settings
    # =========================================================================

    app_name: str = 'Ledger Lens API'

    # Backend URL used by the dashboard proxy configuration
    api_url: str = 'http://localhost:8000'

    log_level: str = 'INFO'

    # =========================================================================
    # Customer Lifetime Value
    # =========================================================================

    # Industry baseline; a customer at or above the average purchase
    # frequency is credited with the full horizon
    clv_base_lifespan_years: float = 3.0

    # Used when there are no profit records or their revenue sums to zero
    clv_default_profit_margin: float = 0.10

    # =========================================================================
    # Profitability x Risk Matrix
    # A margin at the benchmark is high profit; a risk score at the
    # benchmark is still low risk.
    # =========================================================================

    profit_margin_benchmark: float = 5.0
    risk_score_benchmark: float = 40.0
    risk_grade_medium_cutoff: float = 30.0
    risk_grade_high_cutoff: float = 60.0

    # =========================================================================
    # Sensitivity / Decomposition / Aging
    # =========================================================================

    sensitivity_steps: List[float] = Field(
        default_factory=lambda: [-20.0, -15.0, -10.0, -5.0, 0.0, 5.0, 10.0, 15.0, 20.0]
    )

    decomposition_period: int = 12

    default_currency: str = 'KRW'


@lru_cache()
def get_settings() -> Settings:
    """
    Get the application settings singleton.

    Returns a cached Settings instance, ensuring that environment variables
    are only loaded once during the application lifecycle.

    Returns:
        Settings: The application settings instance with all configuration values.

    Raises:
        pydantic.ValidationError: If an environment variable has an invalid
            value (e.g., PROFIT_MARGIN_BENCHMARK=abc).

    Note:
        To refresh settings in tests, clear the cache:
        >>> get_settings.cache_clear()
    """
    return Settings()
