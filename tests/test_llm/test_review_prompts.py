"""Tests for the pipeline review prompt builders."""

from __future__ import annotations

from pipeline_ai.analyzer.models import AnalysisRequest, Platform
from pipeline_ai.llm.prompts.review import (
    REVIEW_SYSTEM_PROMPT,
    build_messages,
    build_review_user_prompt,
)


def _request(**overrides) -> AnalysisRequest:
    data = {"yaml_content": "trigger:\n  - main", "platform": Platform.azure_devops}
    data.update(overrides)
    return AnalysisRequest(**data)


class TestSystemPrompt:
    def test_demands_plain_json(self) -> None:
        assert "valid JSON object" in REVIEW_SYSTEM_PROMPT
        assert "Do not include markdown" in REVIEW_SYSTEM_PROMPT

    def test_names_severity_levels(self) -> None:
        for level in ("Error", "Warning", "Info"):
            assert level in REVIEW_SYSTEM_PROMPT


class TestUserPrompt:
    def test_includes_platform_and_file(self) -> None:
        prompt = build_review_user_prompt(_request(file_name="ci.yml"))
        assert "Please analyze this AzureDevOps pipeline" in prompt
        assert "Filename: ci.yml" in prompt

    def test_default_file_name(self) -> None:
        assert "Filename: pipeline.yml" in build_review_user_prompt(_request())

    def test_yaml_embedded_verbatim(self) -> None:
        yaml_str = "steps:\n  - run: echo '```not escaped```'\n"
        prompt = build_review_user_prompt(_request(yaml_content=yaml_str))
        assert f"```yaml\n{yaml_str}\n```" in prompt

    def test_includes_schema_template(self) -> None:
        prompt = build_review_user_prompt(_request(platform=Platform.github_actions))
        assert "GitHubActions" in prompt
        for key in ('"summary"', '"issues"', '"suggestedYaml"', '"lineReference"', '"detectedTools"'):
            assert key in prompt


def test_build_messages_pair() -> None:
    system, user = build_messages(_request())
    assert system == REVIEW_SYSTEM_PROMPT
    assert user == build_review_user_prompt(_request())
