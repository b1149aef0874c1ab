"""
Error types raised by the DailyMed tools.

Every error carries a single human-readable message; the MCP layer
reports it verbatim as an error-flagged tool result.
"""


class DailyMedError(Exception):
    """Base class for all errors raised by this package."""


class ConfigurationError(DailyMedError):
    """A mapping dataset file is missing or unreadable. Fatal at startup."""


class ValidationError(DailyMedError):
    """Invalid identifier, search parameters or pagination values."""


class UpstreamError(DailyMedError):
    """Non-2xx response, network failure or unexpected response shape."""


class ExtractionError(DailyMedError):
    """An SPL XML document could not be parsed or has no document root."""
