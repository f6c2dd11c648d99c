"""
Core dependencies shared by the routers
"""

from emis_party.config import Settings, settings
from emis_party.core.query import QueryOptions, get_query_options

__all__ = ["get_settings", "get_query_options", "QueryOptions"]


def get_settings() -> Settings:
    """Settings loaded once at startup; overridden in tests."""
    return settings
