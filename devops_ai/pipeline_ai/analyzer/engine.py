"""Analysis engine: prompt → chat backend → lenient parse."""

from __future__ import annotations

import logging

from pipeline_ai.analyzer.models import AnalysisRequest, AnalysisResult
from pipeline_ai.analyzer.parser import parse_response
from pipeline_ai.llm.base import LLMBackend
from pipeline_ai.llm.prompts.review import build_messages
from pipeline_ai.tools import TOOL_DEFINITIONS, invoke_tool

logger = logging.getLogger(__name__)


class PipelineAnalyzer:
    """Sends one pipeline definition to the model and parses its critique."""

    def __init__(self, llm_backend: LLMBackend) -> None:
        self._llm = llm_backend

    async def analyze(self, request: AnalysisRequest) -> AnalysisResult:
        """Review ``request``.

        Transport failures are logged and re-raised. A malformed reply is
        not an error here: it comes back as a result with a System issue.
        """
        logger.info("Analyzing pipeline for platform %s", request.platform.value)

        system_prompt, user_prompt = build_messages(request)

        try:
            llm_response = await self._llm.generate(
                system_prompt,
                user_prompt,
                tools=TOOL_DEFINITIONS,
                tool_handler=invoke_tool,
            )
        except Exception:
            logger.exception("Failed to analyze pipeline")
            raise

        logger.debug(
            "Model %s replied: prompt_tokens=%d, completion_tokens=%d, tool_calls=%d",
            llm_response.model,
            llm_response.prompt_tokens,
            llm_response.completion_tokens,
            llm_response.tool_calls_made,
        )

        result = parse_response(llm_response.content)
        logger.info("Analysis complete. Found %d issues", len(result.issues))
        return result
