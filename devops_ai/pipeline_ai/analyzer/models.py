"""Data models for pipeline analysis requests and results."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Platform(str, Enum):
    """CI/CD platform a pipeline definition targets."""

    azure_devops = "AzureDevOps"
    github_actions = "GitHubActions"


class Severity(str, Enum):
    """Issue severity: Error = must fix, Warning = should fix, Info = nice to have."""

    error = "Error"
    warning = "Warning"
    info = "Info"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]

    @classmethod
    def parse(cls, value: str | None) -> Severity:
        """Match a severity name case-insensitively, falling back to Info."""
        if value:
            lowered = value.strip().lower()
            for member in cls:
                if member.value.lower() == lowered:
                    return member
        return cls.info


_SEVERITY_RANK = {
    Severity.info: 0,
    Severity.warning: 1,
    Severity.error: 2,
}


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class AnalysisRequest(_CamelModel):
    """A single pipeline definition submitted for review."""

    yaml_content: str
    platform: Platform
    file_name: str | None = None


class PipelineIssue(_CamelModel):
    """A single finding reported by the reviewer."""

    severity: Severity
    category: str
    message: str
    suggestion: str | None = None
    line_reference: str | None = None


class PipelineMetadata(_CamelModel):
    """Static facts about a pipeline definition."""

    job_count: int = 0
    step_count: int = 0
    has_tests: bool = False
    has_caching: bool = False
    has_security_scanning: bool = False
    has_artifact_publishing: bool = False
    detected_tools: list[str] = Field(default_factory=list)


class AnalysisResult(_CamelModel):
    """Complete result of a pipeline review."""

    summary: str
    issues: list[PipelineIssue] = Field(default_factory=list)
    suggested_yaml: str | None = None
    metadata: PipelineMetadata | None = None

    @property
    def has_errors(self) -> bool:
        return any(issue.severity is Severity.error for issue in self.issues)

    def sorted_issues(self) -> list[PipelineIssue]:
        """Issues ordered Error → Warning → Info, stable within a severity."""
        return sorted(self.issues, key=lambda issue: issue.severity.rank, reverse=True)


class BestPractice(_CamelModel):
    """A static best-practice entry offered to the model."""

    name: str
    description: str
    category: str
