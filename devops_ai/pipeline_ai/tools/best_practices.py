"""Static best-practice tables per pipeline platform."""

from __future__ import annotations

import json

from pipeline_ai.analyzer.models import BestPractice

AZURE_DEVOPS_PRACTICES: tuple[BestPractice, ...] = (
    BestPractice(name="Caching", description="Use Cache@2 task to cache NuGet packages and node_modules", category="Performance"),
    BestPractice(name="Test Results", description="Publish test results using PublishTestResults@2 for visibility", category="Quality"),
    BestPractice(name="Code Coverage", description="Enable code coverage and publish with PublishCodeCoverageResults@1", category="Quality"),
    BestPractice(name="Artifacts", description="Use PublishBuildArtifacts@1 to preserve build outputs", category="Reliability"),
    BestPractice(name="Variables", description="Use variable groups for secrets, never hardcode sensitive values", category="Security"),
    BestPractice(name="Templates", description="Extract reusable steps into templates for consistency", category="Maintainability"),
    BestPractice(name="Triggers", description="Configure appropriate branch triggers and PR validation", category="Process"),
    BestPractice(name="Pool Selection", description="Consider self-hosted agents for sensitive builds or specific requirements", category="Security"),
)

GITHUB_ACTIONS_PRACTICES: tuple[BestPractice, ...] = (
    BestPractice(name="Caching", description="Use actions/cache to cache dependencies", category="Performance"),
    BestPractice(name="Pinned Versions", description="Pin action versions to specific SHA or tag, not @main", category="Security"),
    BestPractice(name="Secrets", description="Use repository or organization secrets, never hardcode", category="Security"),
    BestPractice(name="Concurrency", description="Use concurrency groups to prevent duplicate runs", category="Efficiency"),
    BestPractice(name="Permissions", description="Set minimum required permissions using 'permissions' key", category="Security"),
    BestPractice(name="Reusable Workflows", description="Extract common workflows for reuse across repos", category="Maintainability"),
    BestPractice(name="Matrix Builds", description="Use matrix strategy for multi-platform/version testing", category="Coverage"),
    BestPractice(name="Artifacts", description="Use actions/upload-artifact to preserve outputs", category="Reliability"),
)

GENERAL_PRACTICES: tuple[BestPractice, ...] = (
    BestPractice(name="Testing", description="Include automated tests in every pipeline", category="Quality"),
    BestPractice(name="Security Scanning", description="Add SAST/DAST scanning to catch vulnerabilities", category="Security"),
    BestPractice(name="Dependency Scanning", description="Scan dependencies for known vulnerabilities", category="Security"),
    BestPractice(name="Build Caching", description="Cache dependencies to speed up builds", category="Performance"),
    BestPractice(name="Artifact Management", description="Publish and version build artifacts", category="Reliability"),
)

_BY_PLATFORM = {
    "azuredevops": AZURE_DEVOPS_PRACTICES,
    "githubactions": GITHUB_ACTIONS_PRACTICES,
}


def get_best_practices(platform: str) -> list[BestPractice]:
    """Best practices for ``platform``; unknown platforms get the general list."""
    key = str(platform or "").strip().lower()
    return list(_BY_PLATFORM.get(key, GENERAL_PRACTICES))


def get_best_practices_json(platform: str) -> str:
    """Tool entry point: the practice list as indented JSON."""
    practices = [p.model_dump(by_alias=True) for p in get_best_practices(platform)]
    return json.dumps(practices, indent=2)
