"""
Structural Diff Stage

Compares two element tables produced by the extraction stage and classifies
every element ID as added, removed, modified or unchanged.

Property values are compared with exact string equality. A property that is
missing on one side is reported as ``None`` on that side, which keeps it
distinct from a property that is present with an empty value.
"""

import logging
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from bpmn_diff.models.diff import (
    DiffResult,
    ElementDescriptor,
    ModificationDetail,
    PropertyChange,
)

logger = logging.getLogger(__name__)

# Namespace declarations and diagram interchange (layout) keys carry no
# process semantics
DEFAULT_IGNORED_PREFIXES = ("xmlns", "bpmndi", "dc:", "di:")


def _ordered_union(first: Iterable[str], second: Iterable[str]) -> List[str]:
    """Keys of ``first`` in order, followed by keys only found in ``second``."""
    seen: Dict[str, None] = dict.fromkeys(first)
    for key in second:
        seen.setdefault(key, None)
    return list(seen)


class BPMNDiffer:
    """Computes a DiffResult from two element tables.

    The union of IDs is walked in a stable order (document 1 order, then IDs
    only present in document 2), so repeated runs over the same input produce
    identical results.
    """

    def __init__(self, ignored_prefixes: Optional[Sequence[str]] = None):
        """Initialize differ.

        Args:
            ignored_prefixes: Property key prefixes excluded from comparison
        """
        self.ignored_prefixes = tuple(
            DEFAULT_IGNORED_PREFIXES if ignored_prefixes is None else ignored_prefixes
        )

    def is_comparable_property(self, key: str) -> bool:
        """Check whether a property key takes part in comparison."""
        return not key.startswith(self.ignored_prefixes)

    def compare(
        self,
        table1: Mapping[str, ElementDescriptor],
        table2: Mapping[str, ElementDescriptor],
    ) -> DiffResult:
        """Compare two element tables.

        Args:
            table1: Elements of the original document
            table2: Elements of the changed document

        Returns:
            DiffResult with added, removed and modified elements
        """
        added: List[str] = []
        removed: List[str] = []
        modified: List[ModificationDetail] = []
        added_details: List[ElementDescriptor] = []
        removed_details: List[ElementDescriptor] = []

        for element_id in _ordered_union(table1, table2):
            el1 = table1.get(element_id)
            el2 = table2.get(element_id)

            if el2 is None:
                removed.append(element_id)
                removed_details.append(el1)
            elif el1 is None:
                added.append(element_id)
                added_details.append(el2)
            else:
                detail = self.reconcile(el1, el2)
                if detail is not None:
                    modified.append(detail)

        logger.debug(
            f"Diff computed: {len(added)} added, {len(removed)} removed, {len(modified)} modified"
        )

        return DiffResult(
            added=added,
            removed=removed,
            modified=modified,
            added_details=added_details,
            removed_details=removed_details,
        )

    def reconcile(
        self, el1: ElementDescriptor, el2: ElementDescriptor
    ) -> Optional[ModificationDetail]:
        """Compare the property bags of one element present in both documents.

        Returns:
            ModificationDetail, or None if all comparable properties are equal
        """
        changes: List[PropertyChange] = []

        for key in _ordered_union(el1.properties, el2.properties):
            if not self.is_comparable_property(key):
                continue

            old_value = el1.properties.get(key)
            new_value = el2.properties.get(key)
            if old_value != new_value:
                changes.append(
                    PropertyChange(property=key, old_value=old_value, new_value=new_value)
                )

        if not changes:
            return None

        if el1.type != el2.type:
            logger.debug(f"Element '{el1.id}' changed type {el1.type} -> {el2.type}; diffed by ID")

        return ModificationDetail(
            id=el1.id,
            name=el1.name or el2.name,
            type=el1.type,
            changes=changes,
        )


def compare_tables(
    table1: Mapping[str, ElementDescriptor],
    table2: Mapping[str, ElementDescriptor],
) -> DiffResult:
    """Compare two element tables with the default exclusion rules."""
    return BPMNDiffer().compare(table1, table2)
