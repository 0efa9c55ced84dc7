"""Command-line entrypoint: ``devops-ai analyze``."""

from __future__ import annotations

import asyncio
import logging
import os
import sys
from enum import Enum
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from pipeline_ai.analyzer.engine import PipelineAnalyzer
from pipeline_ai.analyzer.models import AnalysisRequest, AnalysisResult, Platform
from pipeline_ai.config import ProviderConfig, load_config
from pipeline_ai.demo import DEMO_FILE_NAME, get_demo_yaml
from pipeline_ai.llm.factory import create_backend
from pipeline_ai.output.console import (
    exit_code_for,
    render_json,
    render_table,
    write_suggested_yaml,
)

logger = logging.getLogger(__name__)

app = typer.Typer(
    help="AI-assisted review of CI/CD pipeline definitions.",
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)


class OutputFormat(str, Enum):
    table = "table"
    json = "json"


def configure_logging(verbose: bool = False) -> None:
    """Log to stderr; DEBUG with --verbose or DEVOPS_AI_DEV_MODE set."""
    debug = verbose or bool(os.environ.get("DEVOPS_AI_DEV_MODE"))
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        stream=sys.stderr,
    )


@app.callback()
def main() -> None:
    """DevOps AI assistant."""


@app.command()
def analyze(
    file: Path = typer.Option(None, "--file", "-f", help="Path to the pipeline YAML file"),
    platform: Platform = typer.Option(
        Platform.azure_devops,
        "--platform",
        "-p",
        case_sensitive=False,
        help="Pipeline platform: AzureDevOps or GitHubActions",
    ),
    output_format: OutputFormat = typer.Option(
        OutputFormat.table, "--format", case_sensitive=False, help="Output format: table or json",
    ),
    show_yaml: bool = typer.Option(False, "--show-yaml", help="Display the suggested improved YAML"),
    output: Path = typer.Option(None, "--output", help="Save suggested YAML to a file"),
    demo: bool = typer.Option(False, "--demo", help="Run with a built-in sample pipeline"),
    config_path: Path = typer.Option(None, "--config", help="Settings file (default: appsettings.json)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Analyze a CI/CD pipeline YAML file.

    Examples: ``analyze --file azure-pipelines.yml --show-yaml`` or
    ``analyze --demo --platform GitHubActions``.
    """
    configure_logging(verbose)
    code = _execute(
        file=file,
        platform=platform,
        output_format=output_format,
        show_yaml=show_yaml,
        output=output,
        demo=demo,
        config_path=config_path,
    )
    raise typer.Exit(code=code)


def _execute(
    *,
    file: Path | None,
    platform: Platform,
    output_format: OutputFormat,
    show_yaml: bool,
    output: Path | None,
    demo: bool,
    config_path: Path | None,
) -> int:
    try:
        loaded = _load_pipeline(file, demo, platform)
        if loaded is None:
            return 1
        yaml_content, file_name = loaded

        if not yaml_content.strip():
            err_console.print("[red]Error:[/] No pipeline content to analyze.")
            return 1

        request = AnalysisRequest(
            yaml_content=yaml_content,
            platform=platform,
            file_name=file_name,
        )
        config = load_config(config_path)

        with err_console.status(
            "Analyzing pipeline...", spinner="dots", spinner_style="blue",
        ):
            result = asyncio.run(_run_analysis(config, request))

        if output_format is OutputFormat.json:
            typer.echo(render_json(result))
        else:
            render_table(
                result,
                file_name=file_name,
                platform=platform.value,
                show_yaml=show_yaml,
                console=console,
            )

        if output is not None and write_suggested_yaml(result, output):
            notice = err_console if output_format is OutputFormat.json else console
            notice.print(f"\n[green]✓[/] Suggested YAML saved to: [blue]{escape(str(output))}[/]")

        return exit_code_for(result)
    except KeyboardInterrupt:
        err_console.print("[yellow]Cancelled.[/]")
        return 1
    except Exception as e:
        logger.debug("analyze failed", exc_info=True)
        err_console.print(f"[red]Error:[/] {escape(str(e))}")
        return 1


def _load_pipeline(
    file: Path | None, demo: bool, platform: Platform,
) -> tuple[str, str] | None:
    """Return (yaml, file name), or None after reporting an input error."""
    if demo:
        return get_demo_yaml(platform), DEMO_FILE_NAME

    if file is None or not str(file).strip():
        err_console.print("[yellow]No file specified.[/] Use --file <path> or --demo")
        return None

    if not file.is_file():
        err_console.print(f"[red]File not found:[/] {escape(str(file))}")
        return None

    return file.read_text(encoding="utf-8"), file.name


async def _run_analysis(config: ProviderConfig, request: AnalysisRequest) -> AnalysisResult:
    backend = create_backend(config)
    try:
        return await PipelineAnalyzer(backend).analyze(request)
    finally:
        await backend.close()


if __name__ == "__main__":
    app()
