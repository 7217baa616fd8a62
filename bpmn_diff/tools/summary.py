"""
Diff Summary Helpers

Search, type filtering and human-readable type labels for presenting a
DiffResult in the CLI or a front end.
"""

import re
from typing import List, NamedTuple, Optional

from bpmn_diff.models.diff import DiffResult

ALL_TYPES = "all"


class TypeInfo(NamedTuple):
    """Friendly title and short description of a BPMN element type."""

    title: str
    description: str


# Matched in order against the lower-cased type; first substring hit wins
_FRIENDLY_TYPES = [
    ("exclusivegateway", TypeInfo("Decision Point", "Directs the flow based on specific logic.")),
    ("parallelgateway", TypeInfo("Parallel Split/Join", "Concurrent process paths.")),
    ("inclusivegateway", TypeInfo("Inclusive Decision", "One or more conditional paths.")),
    ("sequenceflow", TypeInfo("Sequence Flow", "Primary direction of the process.")),
    ("association", TypeInfo("Association", "Linked information or artifacts.")),
    ("annotation", TypeInfo("Text Annotation", "Documentation or comments.")),
    ("dataobject", TypeInfo("Data Object", "Information used or produced.")),
    ("datastore", TypeInfo("Data Store", "Persistent storage location.")),
    ("message", TypeInfo("Message Event", "External communication.")),
    ("timer", TypeInfo("Timer Event", "Time-based delay or trigger.")),
    ("signal", TypeInfo("Signal Event", "Broadcast communication.")),
    ("error", TypeInfo("Error Event", "Exception handling.")),
    ("escalation", TypeInfo("Escalation Event", "Status change notice.")),
    ("startevent", TypeInfo("Start Event", "Process entry point.")),
    ("endevent", TypeInfo("End Event", "Process completion point.")),
    ("usertask", TypeInfo("User Task", "Human worker activity.")),
    ("servicetask", TypeInfo("Service Task", "Automated system activity.")),
    ("manualtask", TypeInfo("Manual Task", "Offline physical activity.")),
    ("callactivity", TypeInfo("Call Activity", "Invokes a separate process.")),
    ("subprocess", TypeInfo("Sub-Process", "Grouped internal flow.")),
]

_CAMEL_BOUNDARY = re.compile(r"([A-Z])")


def friendly_type_info(element_type: str) -> TypeInfo:
    """Human-readable title/description for an element type.

    Unknown types fall back to the camelCase name split into words, e.g.
    ``businessRuleTask`` -> ``business Rule Task``.
    """
    lowered = element_type.lower()
    for needle, info in _FRIENDLY_TYPES:
        if needle in lowered:
            return info
    return TypeInfo(_CAMEL_BOUNDARY.sub(r" \1", element_type).strip(), "BPMN process element.")


def friendly_type_title(element_type: str) -> str:
    return friendly_type_info(element_type).title


def element_types(diff: DiffResult) -> List[str]:
    """Sorted unique element types appearing anywhere in the diff."""
    types = {el.type for el in diff.added_details}
    types.update(el.type for el in diff.removed_details)
    types.update(detail.type for detail in diff.modified)
    return sorted(types)


def _matches(item, search: str, element_type: Optional[str]) -> bool:
    if element_type and element_type != ALL_TYPES and item.type != element_type:
        return False
    if not search:
        return True
    needle = search.lower()
    return (
        needle in (item.name or "").lower()
        or needle in item.id.lower()
        or needle in item.type.lower()
    )


def filter_diff(
    diff: DiffResult,
    search: str = "",
    element_type: Optional[str] = None,
) -> DiffResult:
    """Restrict a diff to elements matching a search term and/or type.

    Args:
        diff: Comparison result
        search: Case-insensitive substring matched against name, ID and type
        element_type: Exact element type to keep (``None`` or ``"all"`` keeps all)

    Returns:
        A new DiffResult; ``added``/``removed`` stay parallel to their details
    """
    added_details = [el for el in diff.added_details if _matches(el, search, element_type)]
    removed_details = [el for el in diff.removed_details if _matches(el, search, element_type)]
    modified = [detail for detail in diff.modified if _matches(detail, search, element_type)]

    return DiffResult(
        added=[el.id for el in added_details],
        removed=[el.id for el in removed_details],
        modified=modified,
        added_details=added_details,
        removed_details=removed_details,
    )
