"""
Diagram Highlighting

Pure functions mapping a DiffResult onto the element markers a diagram
renderer applies to the two side-by-side views. Removed elements only exist
in the original diagram and added elements only in the changed one; modified
elements are marked on both.
"""

from enum import Enum
from typing import Dict, Optional

from bpmn_diff.models.diff import DiffResult


class HighlightCategory(str, Enum):
    """Highlight categories understood by the viewer."""

    ADDED = "added"
    REMOVED = "removed"
    MODIFIED = "modified"

    @property
    def marker(self) -> str:
        """CSS marker class applied to the diagram element."""
        return f"highlight-{self.value}"


class DiagramSide(str, Enum):
    """Which of the two rendered diagrams is being highlighted."""

    ORIGINAL = "original"
    MODIFIED = "modified"


def highlight_category(element_id: str, diff: DiffResult) -> Optional[HighlightCategory]:
    """Category of an element ID, or None if it is unchanged or unknown."""
    category = diff.category_of(element_id)
    return HighlightCategory(category) if category else None


def build_highlight_map(diff: DiffResult, side: DiagramSide) -> Dict[str, HighlightCategory]:
    """Element ID -> category for every element to mark on one diagram.

    Args:
        diff: Comparison result
        side: Diagram being rendered

    Returns:
        Mapping of element IDs present on that side to their category
    """
    side = DiagramSide(side)
    highlights: Dict[str, HighlightCategory] = {}

    if side == DiagramSide.ORIGINAL:
        for element_id in diff.removed:
            highlights[element_id] = HighlightCategory.REMOVED
    else:
        for element_id in diff.added:
            highlights[element_id] = HighlightCategory.ADDED

    for element_id in diff.modified_ids:
        highlights[element_id] = HighlightCategory.MODIFIED

    return highlights
