"""
DailyMed MCP - FDA drug labeling tools for agent hosts.

This package exposes the DailyMed public REST API and the DailyMed
RxNorm / pharmacologic class mapping files as Model Context Protocol
tools, with a structured extraction of full SPL documents.
"""

__version__ = "0.1.0"
