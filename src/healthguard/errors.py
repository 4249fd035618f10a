"""Exception types."""

from __future__ import annotations


class OracleError(RuntimeError):
    """An oracle call failed, timed out, or returned an out-of-contract response."""


class SnapshotError(RuntimeError):
    """A stored village snapshot could not be read."""


class ReportValidationError(ValueError):
    """A field report could not be built from the submitted values."""
