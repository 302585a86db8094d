from __future__ import annotations


class ExportError(ValueError):
    """Base class for failures that stop an export from producing a file."""


class NoDataError(ExportError):
    """Raised when the built table has no data rows to export."""


class EncodingError(ExportError):
    """Raised when a table cannot be encoded into the requested file format."""
