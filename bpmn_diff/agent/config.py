"""
Comparison Configuration Schema

Defines configuration for the BPMNComparer: property exclusion rules,
history storage and observability flags.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Tuple

from bpmn_diff.core.observability import LogLevel
from bpmn_diff.stages.differ import DEFAULT_IGNORED_PREFIXES

DEFAULT_HISTORY_PATH = Path.home() / ".bpmn-diff" / "history.json"
DEFAULT_MAX_HISTORY = 20


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class ComparisonConfig:
    """Complete comparison configuration."""

    # Differ
    ignored_property_prefixes: Tuple[str, ...] = DEFAULT_IGNORED_PREFIXES

    # History
    history_path: Path = field(default_factory=lambda: DEFAULT_HISTORY_PATH)
    max_history: int = DEFAULT_MAX_HISTORY

    # Observability. enable_logging replaces the root logging handlers.
    enable_logging: bool = False
    enable_metrics: bool = True
    enable_tracing: bool = False
    log_level: LogLevel = LogLevel.INFO

    def __post_init__(self):
        if self.max_history < 1:
            raise ValueError(f"max_history must be at least 1, got {self.max_history}")
        self.history_path = Path(self.history_path)

    @classmethod
    def from_env(cls) -> "ComparisonConfig":
        """Create comparison config from environment variables.

        Returns:
            ComparisonConfig instance
        """
        try:
            log_level = LogLevel(os.getenv("BPMN_DIFF_LOG_LEVEL", "INFO").upper())
        except ValueError:
            log_level = LogLevel.INFO

        try:
            max_history = int(os.getenv("BPMN_DIFF_MAX_HISTORY", str(DEFAULT_MAX_HISTORY)))
        except ValueError:
            max_history = DEFAULT_MAX_HISTORY
        if max_history < 1:
            max_history = DEFAULT_MAX_HISTORY

        return cls(
            history_path=Path(os.getenv("BPMN_DIFF_HISTORY_PATH", str(DEFAULT_HISTORY_PATH))),
            max_history=max_history,
            enable_tracing=_env_flag("BPMN_DIFF_ENABLE_TRACING", False),
            log_level=log_level,
        )
