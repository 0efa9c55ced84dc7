"""Lenient parsing of the model's JSON reply into an AnalysisResult.

The reply is untrusted: it is first validated into DTOs whose fields are
all optional, then mapped field by field onto the strict result models.
Nothing in this module raises on bad input.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError, model_validator
from pydantic.alias_generators import to_camel

from pipeline_ai.analyzer.models import (
    AnalysisResult,
    PipelineIssue,
    PipelineMetadata,
    Severity,
)

logger = logging.getLogger(__name__)

DEFAULT_SUMMARY = "Analysis complete"
DEFAULT_CATEGORY = "General"
SYSTEM_CATEGORY = "System"
RETRY_SUGGESTION = "Please try again or check the pipeline YAML syntax"


class _LenientModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    @model_validator(mode="before")
    @classmethod
    def _match_keys_case_insensitively(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        aliases = {
            (field.alias or name).lower(): field.alias or name
            for name, field in cls.model_fields.items()
        }
        return {aliases.get(str(key).lower(), key): value for key, value in data.items()}


class _IssueDto(_LenientModel):
    severity: str | None = None
    category: str | None = None
    message: str | None = None
    suggestion: str | None = None
    line_reference: str | None = None


class _MetadataDto(_LenientModel):
    job_count: int | None = None
    step_count: int | None = None
    has_tests: bool | None = None
    has_caching: bool | None = None
    has_security_scanning: bool | None = None
    has_artifact_publishing: bool | None = None
    detected_tools: list[str] | None = None


class _ResponseDto(_LenientModel):
    summary: str | None = None
    issues: list[_IssueDto] | None = None
    suggested_yaml: str | None = None
    metadata: _MetadataDto | None = None


def strip_markdown_fences(raw_text: str) -> str:
    """Remove ```json / ``` markers and surrounding whitespace."""
    return raw_text.replace("```json", "").replace("```", "").strip()


def parse_response(raw_text: str | None) -> AnalysisResult:
    """Convert a raw model reply into an AnalysisResult.

    Unparseable or schema-violating replies become a result carrying a
    single Error issue in the System category.
    """
    text = strip_markdown_fences(raw_text or "")

    try:
        raw = json.loads(text)
    except (ValueError, RecursionError) as e:
        logger.warning("Model reply is not valid JSON: %s", e)
        return error_result(f"JSON parsing error: {e}")

    if not isinstance(raw, dict):
        logger.warning("Model reply is not a JSON object (got %s)", type(raw).__name__)
        return error_result("Failed to parse AI response")

    try:
        dto = _ResponseDto.model_validate(raw)
    except ValidationError as e:
        logger.warning("Model reply does not match the response schema: %s", e)
        return error_result(
            f"Response validation error: {e.error_count()} invalid field(s) "
            f"({_first_error_location(e)})"
        )

    return _to_result(dto)


def error_result(message: str) -> AnalysisResult:
    """A result describing a failure, with one System error issue."""
    return AnalysisResult(
        summary=message,
        issues=[
            PipelineIssue(
                severity=Severity.error,
                category=SYSTEM_CATEGORY,
                message=message,
                suggestion=RETRY_SUGGESTION,
            )
        ],
    )


def _to_result(dto: _ResponseDto) -> AnalysisResult:
    return AnalysisResult(
        summary=dto.summary if dto.summary and dto.summary.strip() else DEFAULT_SUMMARY,
        issues=[_to_issue(issue) for issue in dto.issues or []],
        suggested_yaml=dto.suggested_yaml,
        metadata=_to_metadata(dto.metadata) if dto.metadata is not None else None,
    )


def _to_issue(dto: _IssueDto) -> PipelineIssue:
    return PipelineIssue(
        severity=Severity.parse(dto.severity),
        category=dto.category or DEFAULT_CATEGORY,
        message=dto.message or "",
        suggestion=dto.suggestion,
        line_reference=dto.line_reference,
    )


def _to_metadata(dto: _MetadataDto) -> PipelineMetadata:
    tools: list[str] = []
    for tool in dto.detected_tools or []:
        if tool not in tools:
            tools.append(tool)

    return PipelineMetadata(
        job_count=dto.job_count or 0,
        step_count=dto.step_count or 0,
        has_tests=bool(dto.has_tests),
        has_caching=bool(dto.has_caching),
        has_security_scanning=bool(dto.has_security_scanning),
        has_artifact_publishing=bool(dto.has_artifact_publishing),
        detected_tools=tools,
    )


def _first_error_location(error: ValidationError) -> str:
    errors = error.errors()
    if not errors:
        return "unknown"
    return ".".join(str(part) for part in errors[0].get("loc", ())) or "root"
