"""
bpmn-diff Tools

Highlighting, summary filtering, comparison history and the CLI.
"""

from bpmn_diff.tools.highlighting import (
    DiagramSide,
    HighlightCategory,
    build_highlight_map,
    highlight_category,
)
from bpmn_diff.tools.history import ComparisonHistory, HistoryFile, HistoryItem
from bpmn_diff.tools.summary import (
    element_types,
    filter_diff,
    friendly_type_info,
    friendly_type_title,
)

__all__ = [
    "ComparisonHistory",
    "DiagramSide",
    "HighlightCategory",
    "HistoryFile",
    "HistoryItem",
    "build_highlight_map",
    "element_types",
    "filter_diff",
    "friendly_type_info",
    "friendly_type_title",
    "highlight_category",
]
