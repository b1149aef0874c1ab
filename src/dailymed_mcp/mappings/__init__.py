"""
Cross-reference index over the DailyMed mapping files.

This module handles:
- Loading the pharmacologic class and RxNorm mapping files
- Forward and reverse lookups by set id, RxCUI and pharmacologic class
"""

from dailymed_mcp.mappings.index import CrossReferenceIndex
from dailymed_mcp.mappings.models import (
    FilteredPharmacologicClassMapping,
    FilteredRxNormMapping,
    PharmacologicClassMapping,
    RxNormMapping,
)

__all__ = [
    "CrossReferenceIndex",
    "FilteredPharmacologicClassMapping",
    "FilteredRxNormMapping",
    "PharmacologicClassMapping",
    "RxNormMapping",
]
