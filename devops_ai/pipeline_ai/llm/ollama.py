"""Ollama LLM backend implementation."""

from __future__ import annotations

import logging
from typing import Any, Sequence

import httpx

from pipeline_ai.llm.base import MAX_TOOL_ROUNDS, LLMBackend, LLMResponse, ToolHandler

logger = logging.getLogger(__name__)


class OllamaBackend(LLMBackend):
    """Ollama /api/chat backend."""

    def __init__(self, base_url: str, model: str) -> None:
        self._base_url = base_url.rstrip("/")
        self._model = model
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                timeout=httpx.Timeout(120.0, connect=10.0),
            )
        return self._client

    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        tools: Sequence[dict[str, Any]] | None = None,
        tool_handler: ToolHandler | None = None,
    ) -> LLMResponse:
        """Call Ollama /api/chat with system + user messages."""
        client = await self._get_client()
        use_tools = bool(tools) and tool_handler is not None

        messages: list[dict[str, Any]] = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ]
        prompt_tokens = 0
        completion_tokens = 0
        tool_calls_made = 0

        for round_no in range(MAX_TOOL_ROUNDS + 1):
            payload: dict[str, Any] = {
                "model": self._model,
                "messages": messages,
                "stream": False,
            }
            if use_tools and round_no < MAX_TOOL_ROUNDS:
                payload["tools"] = list(tools)

            logger.debug(
                "Ollama request: model=%s, prompt_len=%d, round=%d",
                self._model,
                len(user_prompt),
                round_no,
            )

            data = await self._post(client, payload)
            message = data["message"]
            prompt_tokens += data.get("prompt_eval_count", 0)
            completion_tokens += data.get("eval_count", 0)

            tool_calls = message.get("tool_calls") or []
            if tool_calls and use_tools and round_no < MAX_TOOL_ROUNDS:
                messages.append({
                    "role": "assistant",
                    "content": message.get("content", ""),
                    "tool_calls": tool_calls,
                })
                messages.extend(self._run_tool_calls(tool_calls, tool_handler))
                tool_calls_made += len(tool_calls)
                continue

            return LLMResponse(
                content=message.get("content") or "",
                model=data.get("model", self._model),
                prompt_tokens=prompt_tokens,
                completion_tokens=completion_tokens,
                tool_calls_made=tool_calls_made,
                raw=data,
            )

        raise RuntimeError("Model kept requesting tools without producing an answer")

    async def _post(
        self, client: httpx.AsyncClient, payload: dict[str, Any],
    ) -> dict[str, Any]:
        resp = await client.post("/api/chat", json=payload)
        resp.raise_for_status()

        if not resp.content or not resp.content.strip():
            raise RuntimeError(
                f"Ollama returned an empty response (status {resp.status_code}). "
                f"Check that the endpoint ({self._base_url}) points to a running "
                "Ollama instance."
            )

        try:
            data = resp.json()
        except ValueError:
            preview = resp.text[:200] if resp.text else "(empty)"
            raise RuntimeError(
                f"Ollama returned non-JSON response (status {resp.status_code}): "
                f"{preview}..."
            )

        if not isinstance(data, dict) or "message" not in data:
            keys = list(data.keys()) if isinstance(data, dict) else type(data).__name__
            raise RuntimeError(
                f"Unexpected Ollama response format (missing 'message' key). "
                f"Got keys: {keys}. If the endpoint is an OpenAI-compatible API, "
                "set Provider to 'OpenAI' or 'GitHubModels'."
            )
        return data

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
