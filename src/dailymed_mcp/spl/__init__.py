"""
SPL (Structured Product Labeling) extraction.

This module handles:
- Parsing SPL XML documents
- Flattening narrative markup (paragraphs, lists, tables) to text
- Attaching RxNorm and pharmacologic class cross-references
"""

from dailymed_mcp.spl.extract import document_from_item, extract_document, parse_spl_xml
from dailymed_mcp.spl.models import SPLDocument, SPLSection
from dailymed_mcp.spl.text import flatten, flatten_list, flatten_table

__all__ = [
    "document_from_item",
    "extract_document",
    "parse_spl_xml",
    "SPLDocument",
    "SPLSection",
    "flatten",
    "flatten_list",
    "flatten_table",
]
