"""
Error types raised by bpmn-diff.

Only malformed input is an error. Duplicate IDs and missing optional
substructure are resolved during extraction, and comparison is total.
"""

from typing import Optional


class BPMNDiffError(Exception):
    """Base class for all bpmn-diff errors."""


class InvalidDocumentError(BPMNDiffError, ValueError):
    """A document is not well-formed XML."""

    def __init__(self, label: str, detail: Optional[str] = None):
        self.label = label
        self.detail = detail
        message = f"Invalid XML file provided ({label})"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class HistoryError(BPMNDiffError):
    """A history entry cannot be replayed."""

    def __init__(self, message: str, missing_files: Optional[list] = None):
        super().__init__(message)
        self.missing_files = missing_files or []
