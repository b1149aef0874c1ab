"""
DailyMed REST API access.

This module handles:
- The async HTTP client and upstream error translation
- Server-side and manual pagination
- Per-resource searches and the SPL endpoints
"""

from dailymed_mcp.api.client import DailyMedClient
from dailymed_mcp.api.pagination import (
    Page,
    page_from_metadata,
    paginate,
    validate_pagination_params,
)

__all__ = [
    "DailyMedClient",
    "Page",
    "page_from_metadata",
    "paginate",
    "validate_pagination_params",
]
