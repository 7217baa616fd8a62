"""
Comparison stages: element extraction and structural diff.
"""

from bpmn_diff.stages.differ import BPMNDiffer, compare_tables
from bpmn_diff.stages.element_extraction import (
    ElementExtractor,
    extract_elements,
    parse_document,
)

__all__ = [
    "BPMNDiffer",
    "ElementExtractor",
    "compare_tables",
    "extract_elements",
    "parse_document",
]
