"""
Core infrastructure package for the Ledger Lens backend.

Provides:
- Configuration management via pydantic-settings
- FastAPI dependency injection utilities

This module re-exports key components from submodules for convenient importing:

    from ledgerlens.core import get_settings, SettingsDep

Components Re-exported:
    Settings: Pydantic settings class with all configuration parameters
    get_settings: Function returning the cached Settings singleton
    get_settings_dependency: FastAPI dependency returning Settings
    SettingsDep: Type alias for Settings dependency injection
"""

from ledgerlens.core.config import Settings, get_settings
from ledgerlens.core.dependencies import SettingsDep, get_settings_dependency

__all__ = [
    'Settings',
    'get_settings',
    'get_settings_dependency',
    'SettingsDep',
]
