"""
bpmn-diff: Structural Comparison of BPMN 2.0 Diagrams

Loads two versions of a BPMN process document and reports which process
elements were added, removed or modified, down to individual properties.
"""

__version__ = "0.1.0"

# Core components
from bpmn_diff.core import (
    BPMNDiffError,
    HistoryError,
    InvalidDocumentError,
    ObservabilityConfig,
    ObservabilityManager,
)

# Models
from bpmn_diff.models import (
    DiffResult,
    ElementDescriptor,
    ModificationDetail,
    PropertyChange,
)

# Comparison stages
from bpmn_diff.stages import (
    BPMNDiffer,
    ElementExtractor,
    compare_tables,
    extract_elements,
    parse_document,
)

# Orchestration
from bpmn_diff.agent import BPMNComparer, ComparisonConfig, compare_bpmn

__all__ = [
    # Version
    "__version__",
    # Core
    "BPMNDiffError",
    "HistoryError",
    "InvalidDocumentError",
    "ObservabilityConfig",
    "ObservabilityManager",
    # Models
    "DiffResult",
    "ElementDescriptor",
    "ModificationDetail",
    "PropertyChange",
    # Stages
    "BPMNDiffer",
    "ElementExtractor",
    "compare_tables",
    "extract_elements",
    "parse_document",
    # Orchestration
    "BPMNComparer",
    "ComparisonConfig",
    "compare_bpmn",
]
