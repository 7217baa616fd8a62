"""
Data models for bpmn-diff.
"""

from bpmn_diff.models.diff import (
    DiffResult,
    ElementDescriptor,
    ModificationDetail,
    PropertyChange,
)

__all__ = [
    "DiffResult",
    "ElementDescriptor",
    "ModificationDetail",
    "PropertyChange",
]
