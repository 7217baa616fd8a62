"""
Comparison orchestration, configuration and error types.
"""

from bpmn_diff.agent.comparer import BPMNComparer, compare_bpmn
from bpmn_diff.agent.config import ComparisonConfig
from bpmn_diff.core.errors import BPMNDiffError, HistoryError, InvalidDocumentError

__all__ = [
    # Configuration
    "ComparisonConfig",
    # Orchestrator
    "BPMNComparer",
    "compare_bpmn",
    # Errors
    "BPMNDiffError",
    "HistoryError",
    "InvalidDocumentError",
]
