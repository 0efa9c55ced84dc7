"""Abstract LLM backend interface."""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Sequence

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

# Upper bound on tool-call follow-up requests within one exchange.
MAX_TOOL_ROUNDS = 4

ToolHandler = Callable[[str, dict[str, Any]], str]


class LLMResponse(BaseModel):
    """Structured response from any LLM backend."""

    content: str
    model: str = ""
    prompt_tokens: int = 0
    completion_tokens: int = 0
    tool_calls_made: int = 0
    raw: dict[str, Any] = Field(default_factory=dict)


class LLMBackend(ABC):
    """Abstract interface for chat-completion backends."""

    @property
    def model_name(self) -> str:
        """Return the configured model (or deployment) name."""
        return getattr(self, "_model", "")

    @abstractmethod
    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        tools: Sequence[dict[str, Any]] | None = None,
        tool_handler: ToolHandler | None = None,
    ) -> LLMResponse:
        """Generate a completion given system and user prompts.

        When both ``tools`` and ``tool_handler`` are given, the model may
        request tool calls; the backend executes them through the handler
        and sends the results back until the model answers in text.
        """
        ...

    async def close(self) -> None:
        """Release any transport resources."""

    @staticmethod
    def _run_tool_calls(
        tool_calls: Sequence[dict[str, Any]],
        tool_handler: ToolHandler,
    ) -> list[dict[str, Any]]:
        """Execute requested tool calls and return the ``tool`` reply messages."""
        replies: list[dict[str, Any]] = []
        for call in tool_calls:
            function = call.get("function") or {}
            name = function.get("name", "")
            arguments = function.get("arguments") or {}
            if isinstance(arguments, str):
                try:
                    arguments = json.loads(arguments) if arguments.strip() else {}
                except json.JSONDecodeError:
                    logger.warning("Tool call %s sent non-JSON arguments", name)
                    arguments = {}
            if not isinstance(arguments, dict):
                arguments = {}

            logger.debug("Executing tool call %s", name)
            reply: dict[str, Any] = {
                "role": "tool",
                "content": tool_handler(name, arguments),
            }
            if call.get("id"):
                reply["tool_call_id"] = call["id"]
            replies.append(reply)
        return replies
