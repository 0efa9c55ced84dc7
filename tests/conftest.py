"""Shared test fixtures and configuration."""

import json
import sys
from pathlib import Path

# Add devops_ai/ to Python path so `from pipeline_ai.xxx` imports work
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "devops_ai"))

import pytest

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR


@pytest.fixture
def azure_pipeline_yaml(fixtures_dir: Path) -> str:
    return (fixtures_dir / "azure-pipelines.yml").read_text(encoding="utf-8")


@pytest.fixture
def workflow_yaml(fixtures_dir: Path) -> str:
    return (fixtures_dir / "github-workflow.yml").read_text(encoding="utf-8")


@pytest.fixture
def review_reply() -> str:
    """A well-formed model reply with one issue of each severity."""
    return json.dumps({
        "summary": "The pipeline builds but never runs tests.",
        "issues": [
            {
                "severity": "Info",
                "category": "Maintainability",
                "message": "Consider templates",
                "suggestion": "Extract steps",
            },
            {
                "severity": "Error",
                "category": "Quality",
                "message": "No tests run",
                "suggestion": "Add dotnet test",
                "lineReference": "steps",
            },
            {
                "severity": "Warning",
                "category": "Performance",
                "message": "No caching",
            },
        ],
        "suggestedYaml": "trigger:\n  - main\n",
        "metadata": {
            "jobCount": 1,
            "stepCount": 3,
            "hasTests": False,
            "hasCaching": False,
            "hasSecurityScanning": False,
            "hasArtifactPublishing": False,
            "detectedTools": [".NET SDK"],
        },
    })
