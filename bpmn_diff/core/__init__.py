"""
Core infrastructure module for bpmn-diff.

Provides logging, observability and the error hierarchy.
"""

from .errors import BPMNDiffError, HistoryError, InvalidDocumentError
from .observability import (
    LogLevel,
    ObservabilityConfig,
    ObservabilityManager,
    Timer,
    log_execution,
    record_metric,
    span,
)

__all__ = [
    # Errors
    "BPMNDiffError",
    "HistoryError",
    "InvalidDocumentError",
    # Observability
    "LogLevel",
    "ObservabilityConfig",
    "ObservabilityManager",
    "Timer",
    "log_execution",
    "record_metric",
    "span",
]
