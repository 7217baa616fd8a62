"""
bpmn-diff CLI Interface

Command-line tool for comparing two BPMN files, with search/type filtering
of the result and a persistent comparison history.
"""

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click

from bpmn_diff.agent import BPMNComparer, ComparisonConfig
from bpmn_diff.core.errors import BPMNDiffError
from bpmn_diff.core.observability import LogLevel, ObservabilityConfig, ObservabilityManager
from bpmn_diff.models.diff import DiffResult
from bpmn_diff.tools.history import ComparisonHistory
from bpmn_diff.tools.summary import filter_diff, friendly_type_title

logger = logging.getLogger(__name__)

ABSENT = "<absent>"


@click.group()
@click.option(
    "--history-file",
    type=click.Path(dir_okay=False),
    envvar="BPMN_DIFF_HISTORY_PATH",
    default=None,
    help="History file location (default: ~/.bpmn-diff/history.json)",
)
@click.option(
    "--verbose/--quiet",
    default=False,
    help="Verbose logging output",
)
@click.pass_context
def cli(ctx: click.Context, history_file: Optional[str], verbose: bool):
    """bpmn-diff CLI - Compare two versions of a BPMN diagram."""
    ObservabilityManager.initialize(
        ObservabilityConfig(
            service_name="bpmn-diff-cli",
            log_level=LogLevel.DEBUG if verbose else LogLevel.WARNING,
            enable_tracing=False,
        )
    )

    config = ComparisonConfig.from_env()
    if history_file:
        config.history_path = Path(history_file)

    ctx.obj = config


@cli.command()
@click.argument("file1", type=click.Path(exists=True, dir_okay=False))
@click.argument("file2", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format",
)
@click.option("--search", "-s", default="", help="Only show elements whose name, ID or type contains TEXT")
@click.option("--type", "-t", "element_type", default=None, help="Only show elements of this BPMN type")
@click.option("--no-history", is_flag=True, help="Do not record this comparison in the history")
@click.pass_obj
def compare(
    config: ComparisonConfig,
    file1: str,
    file2: str,
    output_format: str,
    search: str,
    element_type: Optional[str],
    no_history: bool,
) -> None:
    """
    Compare two BPMN files and report added, removed and modified elements.

    \b
    Examples:
        bpmn-diff compare v1.bpmn v2.bpmn
        bpmn-diff compare v1.bpmn v2.bpmn --format json
        bpmn-diff compare v1.bpmn v2.bpmn --type userTask --search review
    """
    try:
        result = BPMNComparer(config).compare_files(file1, file2)
    except (BPMNDiffError, OSError, UnicodeDecodeError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    _output(filter_diff(result, search, element_type), output_format, Path(file1).name, Path(file2).name)

    if not no_history:
        _record_history(ComparisonHistory(config.history_path, config.max_history), file1, file2)


@cli.group()
def history():
    """Inspect and replay previous comparisons."""


@history.command("list")
@click.pass_obj
def history_list(config: ComparisonConfig) -> None:
    """List previous comparisons, newest first."""
    items = ComparisonHistory(config.history_path, config.max_history).get_history()
    if not items:
        click.echo("No comparison history.")
        return

    for index, item in enumerate(items, start=1):
        click.echo(
            f"{index:>3}. {item.file1.name} <-> {item.file2.name}  "
            f"({item.timestamp:%Y-%m-%d %H:%M})"
        )


@history.command("clear")
@click.pass_obj
def history_clear(config: ComparisonConfig) -> None:
    """Delete the comparison history."""
    ComparisonHistory(config.history_path, config.max_history).clear()
    click.echo("Comparison history cleared.")


@history.command("rerun")
@click.argument("index", type=click.IntRange(min=1))
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format",
)
@click.pass_obj
def history_rerun(config: ComparisonConfig, index: int, output_format: str) -> None:
    """Re-run the comparison at position INDEX of `history list`."""
    store = ComparisonHistory(config.history_path, config.max_history)
    item = store.get_item(index - 1)
    if item is None:
        click.echo(f"Error: No history entry #{index}", err=True)
        sys.exit(1)

    try:
        content1, content2 = store.load_files(item)
        result = BPMNComparer(config).compare(
            content1, content2, label1=item.file1.name, label2=item.file2.name
        )
    except (BPMNDiffError, OSError, UnicodeDecodeError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    _output(result, output_format, item.file1.name, item.file2.name)
    _record_history(store, item.file1, item.file2)


@cli.command()
def info() -> None:
    """Show version and feature information."""
    from bpmn_diff import __version__

    info_dict = {
        "name": "bpmn-diff",
        "version": __version__,
        "description": "Structural diff of BPMN 2.0 process diagrams",
        "categories": ["added", "removed", "modified"],
        "features": {
            "extension_properties": True,
            "sequence_flow_references": True,
            "diagram_interchange_compared": False,
            "history": True,
        },
    }

    click.echo(json.dumps(info_dict, indent=2))


# ==================
# Helper Functions
# ==================


def _output(result: DiffResult, output_format: str, name1: str, name2: str) -> None:
    if output_format == "json":
        _output_json(result, name1, name2)
    else:
        _output_text(result, name1, name2)


def _record_history(store: ComparisonHistory, file1, file2) -> None:
    """Save a comparison, exiting with an error if the history cannot be written."""
    try:
        store.save_comparison(file1, file2)
    except OSError as e:
        logger.debug(f"History write to {store.path} failed: {e}")
        click.echo(f"Error: Could not record comparison history: {e}", err=True)
        sys.exit(1)


def _format_value(value: Optional[str]) -> str:
    return ABSENT if value is None else repr(value)


def _describe(element_id: str, element_type: str, name: str) -> str:
    label = f" \"{name}\"" if name else ""
    return f"{element_id}{label} [{friendly_type_title(element_type)}]"


def _output_text(result: DiffResult, name1: str, name2: str) -> None:
    """Output results as plain text."""
    click.echo(f"Comparing {name1} -> {name2}")

    if not result.has_changes:
        click.echo("No differences found.")
        return

    if result.added_details:
        click.echo(f"\nAdded ({len(result.added_details)}):")
        for el in result.added_details:
            click.echo(f"  + {_describe(el.id, el.type, el.name)}")

    if result.removed_details:
        click.echo(f"\nRemoved ({len(result.removed_details)}):")
        for el in result.removed_details:
            click.echo(f"  - {_describe(el.id, el.type, el.name)}")

    if result.modified:
        click.echo(f"\nModified ({len(result.modified)}):")
        for detail in result.modified:
            click.echo(f"  ~ {_describe(detail.id, detail.type, detail.name)}")
            for change in detail.changes:
                click.echo(
                    f"      {change.property}: "
                    f"{_format_value(change.old_value)} -> {_format_value(change.new_value)}"
                )

    counts = result.counts()
    click.echo(
        f"\nSummary: {counts['added']} added, {counts['removed']} removed, "
        f"{counts['modified']} modified"
    )


def _output_json(result: DiffResult, name1: str, name2: str) -> None:
    """Output results as JSON."""
    output = {
        "files": {"original": name1, "modified": name2},
        "summary": result.counts(),
        "diff": result.to_dict(),
    }
    click.echo(json.dumps(output, indent=2))


if __name__ == "__main__":
    cli()
