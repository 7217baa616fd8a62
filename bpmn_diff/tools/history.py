"""
Comparison History

Keeps a most-recent-first list of compared file pairs in a JSON file so that
a comparison can be re-run later from the CLI.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Tuple, Union
from uuid import uuid4

from pydantic import BaseModel, Field, ValidationError

from bpmn_diff.agent.config import DEFAULT_MAX_HISTORY
from bpmn_diff.core.errors import HistoryError

logger = logging.getLogger(__name__)


class HistoryFile(BaseModel):
    """One side of a recorded comparison."""

    path: str = Field(..., description="Absolute file path")
    name: str = Field(..., description="Display name")

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "HistoryFile":
        path = Path(path).resolve()
        return cls(path=str(path), name=path.name)


class HistoryItem(BaseModel):
    """A recorded comparison of two files."""

    id: str = Field(default_factory=lambda: str(uuid4()), description="Entry ID")
    timestamp: datetime = Field(default_factory=datetime.now, description="When it was compared")
    file1: HistoryFile
    file2: HistoryFile

    def same_pair(self, file1: HistoryFile, file2: HistoryFile) -> bool:
        """Check if this entry compares the same two paths, in either order."""
        return (self.file1.path == file1.path and self.file2.path == file2.path) or (
            self.file1.path == file2.path and self.file2.path == file1.path
        )


class HistoryValidation(BaseModel):
    """Whether the files of a history entry still exist."""

    valid: bool
    missing_files: List[str] = Field(default_factory=list)


class ComparisonHistory:
    """JSON-file backed comparison history.

    Entries are stored newest first. Saving a pair that is already recorded
    (in either order) moves it to the front instead of duplicating it, and the
    list is truncated to ``max_items``.
    """

    def __init__(self, path: Union[str, Path], max_items: int = DEFAULT_MAX_HISTORY):
        """Initialize history store.

        Args:
            path: JSON file holding the history
            max_items: Maximum number of entries kept
        """
        self.path = Path(path)
        self.max_items = max_items

    def get_history(self) -> List[HistoryItem]:
        """Load all entries, newest first. Unreadable history yields an empty list."""
        if not self.path.exists():
            return []

        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            return [HistoryItem.model_validate(item) for item in raw]
        except (OSError, ValueError, TypeError, ValidationError) as e:
            logger.error(f"Failed to parse history file {self.path}: {e}")
            return []

    def save_comparison(
        self, file1: Union[str, Path, HistoryFile], file2: Union[str, Path, HistoryFile]
    ) -> HistoryItem:
        """Record a comparison of two files.

        Args:
            file1: Original file (path or HistoryFile)
            file2: Changed file (path or HistoryFile)

        Returns:
            The new history entry
        """
        if not isinstance(file1, HistoryFile):
            file1 = HistoryFile.from_path(file1)
        if not isinstance(file2, HistoryFile):
            file2 = HistoryFile.from_path(file2)

        history = [item for item in self.get_history() if not item.same_pair(file1, file2)]
        new_item = HistoryItem(file1=file1, file2=file2)

        self._write([new_item, *history][: self.max_items])
        logger.debug(f"Saved comparison {file1.name} <-> {file2.name} to history")
        return new_item

    def get_item(self, index: int) -> Optional[HistoryItem]:
        """Entry at a zero-based position, or None if out of range."""
        history = self.get_history()
        if 0 <= index < len(history):
            return history[index]
        return None

    def validate_item(self, item: HistoryItem) -> HistoryValidation:
        """Check that both files of an entry still exist."""
        missing = [f.name for f in (item.file1, item.file2) if not Path(f.path).exists()]
        return HistoryValidation(valid=not missing, missing_files=missing)

    def load_files(self, item: HistoryItem) -> Tuple[str, str]:
        """Read both files of an entry.

        Raises:
            HistoryError: If either file no longer exists
        """
        validation = self.validate_item(item)
        if not validation.valid:
            raise HistoryError(
                f"Files no longer exist: {', '.join(validation.missing_files)}",
                missing_files=validation.missing_files,
            )
        return (
            Path(item.file1.path).read_text(encoding="utf-8"),
            Path(item.file2.path).read_text(encoding="utf-8"),
        )

    def clear(self) -> None:
        """Remove all history."""
        if self.path.exists():
            self.path.unlink()
        logger.debug("Comparison history cleared")

    def _write(self, items: List[HistoryItem]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = [item.model_dump(mode="json") for item in items]
        self.path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
