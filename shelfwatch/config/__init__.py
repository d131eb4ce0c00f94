"""
==============================================================================
Configuration Package
==============================================================================

Centralized configuration management using Pydantic Settings.

Usage:
------
    from shelfwatch.config import get_settings, Settings

    settings = get_settings()
    print(settings.database_url)
    print(settings.email_to)

==============================================================================
"""

from .settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
]
