"""
BPMN Comparer Orchestrator

Coordinates parsing, element extraction and diffing of two BPMN documents
into a single synchronous call.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from bpmn_diff.agent.config import ComparisonConfig
from bpmn_diff.core.observability import (
    ObservabilityConfig,
    ObservabilityManager,
    Timer,
    log_execution,
    record_metric,
    span,
)
from bpmn_diff.models.diff import DiffResult
from bpmn_diff.stages import BPMNDiffer, ElementExtractor, parse_document

logger = logging.getLogger(__name__)

XMLInput = Union[str, bytes]


class BPMNComparer:
    """
    Main comparison orchestrator.

    Runs the pipeline:
    1. Parse both documents (both must be well-formed before going further)
    2. Extract the element table of each document
    3. Diff the two tables
    """

    def __init__(self, config: Optional[ComparisonConfig] = None):
        """Initialize the comparer.

        Args:
            config: Comparison configuration (defaults are used if omitted)
        """
        self.config = config or ComparisonConfig()
        self.extractor = ElementExtractor()
        self.differ = BPMNDiffer(ignored_prefixes=self.config.ignored_property_prefixes)

        if self.config.enable_logging:
            ObservabilityManager.initialize(
                ObservabilityConfig(
                    log_level=self.config.log_level,
                    enable_tracing=self.config.enable_tracing,
                    enable_metrics=self.config.enable_metrics,
                )
            )

    @log_execution(include_args=False, include_duration=True)
    def compare(
        self,
        xml1: XMLInput,
        xml2: XMLInput,
        label1: str = "original",
        label2: str = "modified",
    ) -> DiffResult:
        """
        Compare two BPMN documents.

        Args:
            xml1: Raw XML of the original document
            xml2: Raw XML of the changed document
            label1: Name of the original document (used in error messages)
            label2: Name of the changed document

        Returns:
            DiffResult

        Raises:
            InvalidDocumentError: If either document is not well-formed XML
        """
        with span("bpmn_diff.compare", {"label1": label1, "label2": label2}):
            with Timer("parse"):
                doc1 = parse_document(xml1, label1)
                doc2 = parse_document(xml2, label2)

            with Timer("extraction"):
                table1 = self.extractor.extract(doc1)
                table2 = self.extractor.extract(doc2)

            with Timer("diff"):
                result = self.differ.compare(table1, table2)

        counts = result.counts()
        for category, count in counts.items():
            record_metric(f"elements_{category}_total", count)

        logger.info(
            f"Compared {label1} ({len(table1)} elements) with {label2} ({len(table2)} elements): "
            f"{counts['added']} added, {counts['removed']} removed, {counts['modified']} modified"
        )
        return result

    def compare_files(self, path1: Union[str, Path], path2: Union[str, Path]) -> DiffResult:
        """Read two BPMN files as UTF-8 and compare them."""
        path1, path2 = Path(path1), Path(path2)
        return self.compare(
            path1.read_text(encoding="utf-8"),
            path2.read_text(encoding="utf-8"),
            label1=path1.name,
            label2=path2.name,
        )


def compare_bpmn(xml1: XMLInput, xml2: XMLInput) -> DiffResult:
    """Compare two BPMN documents with the default configuration."""
    return BPMNComparer().compare(xml1, xml2)
