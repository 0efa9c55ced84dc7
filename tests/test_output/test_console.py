"""Tests for terminal and JSON rendering."""

from __future__ import annotations

import json
from io import StringIO

from rich.console import Console

from pipeline_ai.analyzer.models import (
    AnalysisResult,
    PipelineIssue,
    PipelineMetadata,
    Severity,
)
from pipeline_ai.output.console import (
    exit_code_for,
    render_json,
    render_table,
    write_suggested_yaml,
)


def _console() -> Console:
    return Console(record=True, width=200, file=StringIO(), color_system=None)


def _result(**overrides) -> AnalysisResult:
    data = {
        "summary": "Two findings.",
        "issues": [
            PipelineIssue(severity=Severity.info, category="Style", message="info-first"),
            PipelineIssue(
                severity=Severity.error,
                category="Security",
                message="error-second",
                suggestion="Use a secret variable",
            ),
            PipelineIssue(severity=Severity.warning, category="Performance", message="warning-third"),
        ],
        "suggested_yaml": "trigger:\n  - main\n",
        "metadata": PipelineMetadata(
            job_count=2,
            step_count=5,
            has_tests=True,
            detected_tools=[".NET SDK", "Docker"],
        ),
    }
    data.update(overrides)
    return AnalysisResult(**data)


def _render(result: AnalysisResult, show_yaml: bool = False) -> str:
    console = _console()
    render_table(
        result,
        file_name="azure-pipelines.yml",
        platform="AzureDevOps",
        show_yaml=show_yaml,
        console=console,
    )
    return console.export_text()


class TestExitCode:
    def test_error_issue_fails(self) -> None:
        assert exit_code_for(_result()) == 1

    def test_warnings_only_pass(self) -> None:
        issues = [PipelineIssue(severity=Severity.warning, category="X", message="m")]
        assert exit_code_for(_result(issues=issues)) == 0

    def test_no_issues_pass(self) -> None:
        assert exit_code_for(_result(issues=[])) == 0


class TestRenderTable:
    def test_header_and_summary(self) -> None:
        text = _render(_result())
        assert "Pipeline Analysis" in text
        assert "azure-pipelines.yml | Platform: AzureDevOps" in text
        assert "Two findings." in text

    def test_metadata_panel(self) -> None:
        text = _render(_result())
        assert "Jobs:" in text
        assert "Has Tests:" in text
        assert ".NET SDK, Docker" in text

    def test_metadata_absent(self) -> None:
        text = _render(_result(metadata=None))
        assert "Metadata" not in text
        assert "Jobs:" not in text

    def test_issues_sorted_by_severity(self) -> None:
        text = _render(_result())
        assert text.index("error-second") < text.index("warning-third") < text.index("info-first")

    def test_missing_suggestion_shows_dash(self) -> None:
        issues = [PipelineIssue(severity=Severity.warning, category="Performance", message="no-cache")]
        text = _render(_result(issues=issues))
        row = next(line for line in text.splitlines() if "no-cache" in line)
        assert "│ -" in row

    def test_no_issues(self) -> None:
        text = _render(_result(issues=[]))
        assert "No issues found!" in text
        assert "Issues Found" not in text

    def test_markup_in_model_text_is_escaped(self) -> None:
        issues = [
            PipelineIssue(
                severity=Severity.warning,
                category="[bold]Cat[/bold]",
                message="use [red]secrets[/red]",
            ),
        ]
        text = _render(_result(summary="Summary with [link]brackets[/link]", issues=issues))
        assert "[red]secrets[/red]" in text
        assert "[bold]Cat[/bold]" in text
        assert "[link]brackets[/link]" in text

    def test_suggested_yaml_only_on_request(self) -> None:
        assert "Suggested YAML" not in _render(_result())
        text = _render(_result(), show_yaml=True)
        assert "Suggested YAML" in text
        assert "- main" in text

    def test_blank_suggested_yaml_not_shown(self) -> None:
        text = _render(_result(suggested_yaml="   "), show_yaml=True)
        assert "Suggested YAML" not in text


class TestRenderJson:
    def test_camel_case_keys(self) -> None:
        data = json.loads(render_json(_result()))
        assert set(data) == {"summary", "issues", "suggestedYaml", "metadata"}
        assert data["metadata"]["jobCount"] == 2
        assert data["metadata"]["detectedTools"] == [".NET SDK", "Docker"]
        assert data["issues"][1]["severity"] == "Error"
        assert data["issues"][1]["lineReference"] is None

    def test_preserves_issue_order(self) -> None:
        data = json.loads(render_json(_result()))
        assert [i["message"] for i in data["issues"]] == ["info-first", "error-second", "warning-third"]


class TestWriteSuggestedYaml:
    def test_overwrites_existing_file(self, tmp_path) -> None:
        target = tmp_path / "improved.yml"
        target.write_text("old content", encoding="utf-8")
        assert write_suggested_yaml(_result(), target) is True
        assert target.read_text(encoding="utf-8") == "trigger:\n  - main\n"

    def test_no_suggestion_writes_nothing(self, tmp_path) -> None:
        target = tmp_path / "improved.yml"
        assert write_suggested_yaml(_result(suggested_yaml=None), target) is False
        assert write_suggested_yaml(_result(suggested_yaml=" \n"), target) is False
        assert not target.exists()
