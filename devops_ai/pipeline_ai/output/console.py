"""Terminal and JSON rendering of analysis results."""

from __future__ import annotations

import logging
from pathlib import Path

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from pipeline_ai.analyzer.models import AnalysisResult, PipelineMetadata, Severity

logger = logging.getLogger(__name__)

_SEVERITY_STYLE = {
    Severity.error: "red",
    Severity.warning: "yellow",
    Severity.info: "grey50",
}


def exit_code_for(result: AnalysisResult) -> int:
    """1 when any Error-severity issue is present, else 0."""
    return 1 if result.has_errors else 0


def render_json(result: AnalysisResult) -> str:
    """Serialize the full result as indented camelCase JSON."""
    return result.model_dump_json(by_alias=True, indent=2)


def render_table(
    result: AnalysisResult,
    *,
    file_name: str,
    platform: str,
    show_yaml: bool,
    console: Console,
) -> None:
    """Print header, metadata, summary, issues and (optionally) suggested YAML."""
    console.print(
        Panel(
            f"[bold]{escape(file_name)}[/] | Platform: [blue]{escape(platform)}[/]",
            title="[bold blue]Pipeline Analysis[/]",
            box=box.ROUNDED,
        )
    )
    console.print()

    if result.metadata is not None:
        console.print(
            Panel(_metadata_table(result.metadata), title="[bold]Metadata[/]", box=box.ROUNDED)
        )
        console.print()

    console.print(Panel(escape(result.summary), title="[bold]Summary[/]", box=box.ROUNDED))
    console.print()

    if result.issues:
        console.print(_issues_table(result))
    else:
        console.print("[green]✓ No issues found![/]")

    if show_yaml and result.suggested_yaml and result.suggested_yaml.strip():
        console.print()
        console.print(
            Panel(
                escape(result.suggested_yaml),
                title="[bold green]Suggested YAML[/]",
                box=box.ROUNDED,
                expand=True,
            )
        )


def write_suggested_yaml(result: AnalysisResult, path: str | Path) -> bool:
    """Write the suggested YAML to ``path``, replacing any existing file.

    Returns False (and writes nothing) when there is no suggestion.
    """
    if not result.suggested_yaml or not result.suggested_yaml.strip():
        logger.info("No suggested YAML to write to %s", path)
        return False

    Path(path).write_text(result.suggested_yaml, encoding="utf-8")
    logger.info("Suggested YAML written to %s", path)
    return True


def _yes_no(value: bool, missing_style: str = "red") -> str:
    return "[green]Yes[/]" if value else f"[{missing_style}]No[/]"


def _metadata_table(metadata: PipelineMetadata) -> Table:
    table = Table(box=None, show_header=False)
    table.add_column()
    table.add_column()
    table.add_row("Jobs:", str(metadata.job_count))
    table.add_row("Steps:", str(metadata.step_count))
    table.add_row("Has Tests:", _yes_no(metadata.has_tests))
    table.add_row("Has Caching:", _yes_no(metadata.has_caching))
    table.add_row("Security Scanning:", _yes_no(metadata.has_security_scanning, "yellow"))
    table.add_row("Artifact Publishing:", _yes_no(metadata.has_artifact_publishing, "yellow"))
    if metadata.detected_tools:
        table.add_row("Tools:", escape(", ".join(metadata.detected_tools)))
    return table


def _issues_table(result: AnalysisResult) -> Table:
    table = Table(title="[bold]Issues Found[/]", box=box.ROUNDED)
    table.add_column("Severity")
    table.add_column("Category")
    table.add_column("Message")
    table.add_column("Suggestion")

    for issue in result.sorted_issues():
        style = _SEVERITY_STYLE[issue.severity]
        table.add_row(
            f"[{style}]{issue.severity.value}[/]",
            f"[blue]{escape(issue.category)}[/]",
            escape(issue.message),
            escape(issue.suggestion or "-"),
        )
    return table
