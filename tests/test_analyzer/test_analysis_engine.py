"""Tests for PipelineAnalyzer."""

from __future__ import annotations

import json

import pytest

from pipeline_ai.analyzer.engine import PipelineAnalyzer
from pipeline_ai.analyzer.models import AnalysisRequest, Platform, Severity
from pipeline_ai.llm.base import LLMBackend, LLMResponse
from pipeline_ai.llm.prompts.review import REVIEW_SYSTEM_PROMPT
from pipeline_ai.tools import TOOL_DEFINITIONS, invoke_tool


class MockLLM(LLMBackend):
    """Controllable mock LLM backend that records its calls."""

    def __init__(self, content: str = "", fail: bool = False) -> None:
        self._content = content
        self._fail = fail
        self.calls: list[dict] = []

    async def generate(self, system_prompt, user_prompt, tools=None, tool_handler=None) -> LLMResponse:
        self.calls.append({
            "system": system_prompt,
            "user": user_prompt,
            "tools": tools,
            "tool_handler": tool_handler,
        })
        if self._fail:
            raise RuntimeError("LLM failure")
        return LLMResponse(content=self._content, model="mock-model")


def _request(**overrides) -> AnalysisRequest:
    data = {
        "yaml_content": "trigger:\n  - main\n",
        "platform": Platform.azure_devops,
        "file_name": "azure-pipelines.yml",
    }
    data.update(overrides)
    return AnalysisRequest(**data)


@pytest.mark.asyncio
async def test_analyze_parses_reply(review_reply: str) -> None:
    llm = MockLLM(content=review_reply)
    result = await PipelineAnalyzer(llm).analyze(_request())
    assert result.summary.startswith("The pipeline builds")
    assert len(result.issues) == 3
    assert result.has_errors


@pytest.mark.asyncio
async def test_analyze_sends_system_and_user_prompt() -> None:
    llm = MockLLM(content='{"summary": "ok"}')
    await PipelineAnalyzer(llm).analyze(_request(yaml_content="steps:\n  - script: make\n"))
    call = llm.calls[0]
    assert call["system"] == REVIEW_SYSTEM_PROMPT
    assert "steps:\n  - script: make" in call["user"]
    assert "azure-pipelines.yml" in call["user"]


@pytest.mark.asyncio
async def test_analyze_offers_tools() -> None:
    llm = MockLLM(content='{"summary": "ok"}')
    await PipelineAnalyzer(llm).analyze(_request())
    assert llm.calls[0]["tools"] == TOOL_DEFINITIONS
    assert llm.calls[0]["tool_handler"] is invoke_tool


@pytest.mark.asyncio
async def test_malformed_reply_is_not_raised() -> None:
    llm = MockLLM(content="Sorry, I cannot help with that.")
    result = await PipelineAnalyzer(llm).analyze(_request())
    assert len(result.issues) == 1
    assert result.issues[0].category == "System"
    assert result.issues[0].severity is Severity.error


@pytest.mark.asyncio
@pytest.mark.parametrize("content", ["", "   "])
async def test_empty_reply_is_a_system_error(content: str) -> None:
    llm = MockLLM(content=content)
    result = await PipelineAnalyzer(llm).analyze(_request())
    assert result.has_errors
    assert len(result.issues) == 1
    assert result.issues[0].category == "System"
    assert result.summary.startswith("JSON parsing error:")


@pytest.mark.asyncio
async def test_transport_failure_is_reraised() -> None:
    llm = MockLLM(fail=True)
    with pytest.raises(RuntimeError, match="LLM failure"):
        await PipelineAnalyzer(llm).analyze(_request())
    assert len(llm.calls) == 1


@pytest.mark.asyncio
async def test_fenced_reply(review_reply: str) -> None:
    llm = MockLLM(content=f"```json\n{review_reply}\n```")
    result = await PipelineAnalyzer(llm).analyze(_request(platform=Platform.github_actions))
    assert result.metadata is not None
    assert result.metadata.detected_tools == [".NET SDK"]
    assert json.loads(result.model_dump_json(by_alias=True))["suggestedYaml"].startswith("trigger")
