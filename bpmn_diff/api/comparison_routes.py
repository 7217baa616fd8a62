"""
FastAPI REST endpoints for BPMN comparison.

Provides:
- Structural diff of two uploaded BPMN documents
- Per-diagram highlight maps for a side-by-side viewer
"""

import logging
from typing import Dict, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from bpmn_diff.agent import BPMNComparer
from bpmn_diff.core.errors import InvalidDocumentError
from bpmn_diff.models.diff import DiffResult
from bpmn_diff.tools.highlighting import DiagramSide, HighlightCategory, build_highlight_map
from bpmn_diff.tools.summary import filter_diff

logger = logging.getLogger(__name__)

# ===========================
# Request/Response Models
# ===========================


class CompareRequest(BaseModel):
    """Two BPMN documents to compare."""

    original: str = Field(..., description="BPMN XML of the original version")
    modified: str = Field(..., description="BPMN XML of the changed version")
    original_name: str = Field("original", description="Display name of the original file")
    modified_name: str = Field("modified", description="Display name of the changed file")
    search: str = Field("", description="Only keep elements whose name, ID or type contains this")
    element_type: Optional[str] = Field(None, description="Only keep elements of this type")


class HighlightResult(BaseModel):
    """Element markers for both diagrams of the side-by-side view."""

    original: Dict[str, HighlightCategory] = Field(default_factory=dict)
    modified: Dict[str, HighlightCategory] = Field(default_factory=dict)


class CompareResponse(BaseModel):
    """Diff plus highlight maps."""

    summary: Dict[str, int]
    diff: DiffResult
    highlights: HighlightResult


# ===========================
# Initialize Router and Comparer
# ===========================

router = APIRouter(prefix="/api/v1", tags=["comparison"])

# Global comparer instance (will be initialized on first use)
_comparer_instance: Optional[BPMNComparer] = None


def get_comparer() -> BPMNComparer:
    """Get or initialize the comparer."""
    global _comparer_instance
    if _comparer_instance is None:
        _comparer_instance = BPMNComparer()
    return _comparer_instance


def _run_comparison(request: CompareRequest) -> DiffResult:
    try:
        return get_comparer().compare(
            request.original,
            request.modified,
            label1=request.original_name,
            label2=request.modified_name,
        )
    except InvalidDocumentError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e


def _highlights(diff: DiffResult) -> HighlightResult:
    return HighlightResult(
        original=build_highlight_map(diff, DiagramSide.ORIGINAL),
        modified=build_highlight_map(diff, DiagramSide.MODIFIED),
    )


# ===========================
# Endpoints
# ===========================


@router.post("/compare", response_model=CompareResponse)
def compare_documents(request: CompareRequest) -> CompareResponse:
    """
    Compare two BPMN documents.

    Highlights are computed on the full diff so that both diagrams stay
    marked while the listing is filtered.
    """
    diff = _run_comparison(request)
    filtered = filter_diff(diff, request.search, request.element_type)
    return CompareResponse(summary=filtered.counts(), diff=filtered, highlights=_highlights(diff))


@router.post("/compare/highlights", response_model=HighlightResult)
def compare_highlights(request: CompareRequest) -> HighlightResult:
    """Only the highlight maps for two BPMN documents."""
    return _highlights(_run_comparison(request))
