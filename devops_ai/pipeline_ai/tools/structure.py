"""Static pipeline inspection using ruamel.yaml and keyword heuristics."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence
from io import StringIO

from ruamel.yaml import YAML

from pipeline_ai.analyzer.models import PipelineMetadata

logger = logging.getLogger(__name__)

STEP_MARKERS = ("- task:", "- script:", "- uses:", "- run:")

TEST_KEYWORDS = ("dotnet test", "vstest", "pytest", "npm test")
CACHE_KEYWORDS = ("cache@", "actions/cache")
SECURITY_KEYWORDS = ("sonar", "owasp", "snyk", "codeql")
ARTIFACT_KEYWORDS = ("publishbuildartifacts", "upload-artifact")

# (keywords, display name), in reporting order.
TOOL_KEYWORDS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("dotnet",), ".NET SDK"),
    (("node", "npm"), "Node.js"),
    (("docker",), "Docker"),
    (("azure",), "Azure CLI"),
    (("terraform",), "Terraform"),
    (("kubectl", "kubernetes"), "Kubernetes"),
    (("nuget",), "NuGet"),
    (("sonar",), "SonarQube/SonarCloud"),
)


def extract_metadata(yaml_content: str, platform: str) -> PipelineMetadata:
    """Derive job/step counts and practice flags from pipeline YAML.

    Raises on YAML that does not parse or whose root is not a mapping.
    ``platform`` is accepted for the tool contract; the heuristics are
    the same for both platforms.
    """
    yaml = YAML(typ="safe", pure=True)
    root = yaml.load(StringIO(yaml_content))
    if not isinstance(root, Mapping):
        raise ValueError("Pipeline YAML must have a mapping at the root")

    content = yaml_content.lower()
    metadata = PipelineMetadata(
        job_count=count_jobs(root),
        step_count=count_steps(yaml_content),
        has_tests=_contains_any(content, TEST_KEYWORDS),
        has_caching=_contains_any(content, CACHE_KEYWORDS),
        has_security_scanning=_contains_any(content, SECURITY_KEYWORDS),
        has_artifact_publishing=_contains_any(content, ARTIFACT_KEYWORDS),
        detected_tools=detect_tools(content),
    )
    logger.debug(
        "Extracted metadata for %s pipeline: jobs=%d, steps=%d",
        platform,
        metadata.job_count,
        metadata.step_count,
    )
    return metadata


def count_jobs(root: Mapping) -> int:
    """Entries under ``jobs``, else items under ``stages``, else one job."""
    jobs = root.get("jobs")
    if isinstance(jobs, Mapping):
        return len(jobs)

    stages = root.get("stages")
    if isinstance(stages, Sequence) and not isinstance(stages, str):
        return len(stages)

    return 1


def count_steps(yaml_content: str) -> int:
    """Count step markers in the raw text, never less than one."""
    count = sum(yaml_content.count(marker) for marker in STEP_MARKERS)
    return max(count, 1)


def detect_tools(content: str) -> list[str]:
    """Return display names of tools mentioned in lower-cased ``content``."""
    return [
        name for keywords, name in TOOL_KEYWORDS
        if _contains_any(content, keywords)
    ]


def analyze_pipeline_structure(yaml_content: str, platform: str) -> str:
    """Tool entry point: metadata as indented JSON, or a JSON error object."""
    try:
        metadata = extract_metadata(yaml_content, platform)
    except Exception as e:
        logger.warning("Pipeline structure analysis failed: %s", e)
        return json.dumps({"error": str(e)}, indent=2)
    return metadata.model_dump_json(by_alias=True, indent=2)


def _contains_any(content: str, keywords: tuple[str, ...]) -> bool:
    return any(keyword in content for keyword in keywords)
