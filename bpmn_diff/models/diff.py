"""
BPMN Structural Diff Model

Pydantic models describing the per-document element table produced by the
extractor and the categorized diff produced by the differ. All models are
frozen: fields cannot be reassigned. The contained dicts and lists are plain
Python containers and must be treated as read-only by callers.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ElementDescriptor(BaseModel):
    """Flattened view of one identifiable element inside a process."""

    id: str = Field(..., description="Document-assigned element ID (identity key)")
    type: str = Field(..., description="Local tag name, e.g. 'userTask'")
    name: str = Field("", description="Human-readable label, possibly empty")
    properties: Dict[str, str] = Field(
        default_factory=dict,
        description="Attributes plus synthesized extension/incoming/outgoing keys",
    )

    model_config = ConfigDict(frozen=True)


class PropertyChange(BaseModel):
    """One differing property. ``None`` means absent, not empty."""

    property: str = Field(..., description="Property key")
    old_value: Optional[str] = Field(None, alias="oldValue", description="Value in document 1")
    new_value: Optional[str] = Field(None, alias="newValue", description="Value in document 2")

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class ModificationDetail(BaseModel):
    """An element present in both documents with at least one change."""

    id: str = Field(..., description="Element ID")
    name: str = Field("", description="Element name (document 1, else document 2)")
    type: str = Field(..., description="Element type taken from document 1")
    changes: List[PropertyChange] = Field(default_factory=list, description="Property deltas")

    model_config = ConfigDict(frozen=True)


class DiffResult(BaseModel):
    """Categorized structural diff between two BPMN documents."""

    added: List[str] = Field(default_factory=list, description="IDs only in document 2")
    removed: List[str] = Field(default_factory=list, description="IDs only in document 1")
    modified: List[ModificationDetail] = Field(
        default_factory=list, description="IDs in both documents with differences"
    )
    added_details: List[ElementDescriptor] = Field(
        default_factory=list, alias="addedDetails", description="Descriptors of added IDs"
    )
    removed_details: List[ElementDescriptor] = Field(
        default_factory=list, alias="removedDetails", description="Descriptors of removed IDs"
    )

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @property
    def has_changes(self) -> bool:
        """Check if any element was added, removed or modified."""
        return bool(self.added or self.removed or self.modified)

    @property
    def modified_ids(self) -> List[str]:
        return [detail.id for detail in self.modified]

    def category_of(self, element_id: str) -> Optional[str]:
        """Change category of an element ID ("added", "removed", "modified") or None."""
        if element_id in self.added:
            return "added"
        if element_id in self.removed:
            return "removed"
        if element_id in self.modified_ids:
            return "modified"
        return None

    def counts(self) -> Dict[str, int]:
        """Number of elements per change category."""
        return {
            "added": len(self.added),
            "removed": len(self.removed),
            "modified": len(self.modified),
        }

    def to_dict(self) -> Dict:
        """Serialize with the camelCase keys consumed by the viewer front end."""
        return self.model_dump(by_alias=True)
