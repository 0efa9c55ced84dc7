"""OpenAI-compatible LLM backend implementation.

Serves the direct OpenAI API and the GitHub Models catalog, both of which
expose an OpenAI-style chat completions endpoint with bearer-token auth.
"""

from __future__ import annotations

import logging
from typing import Any, Sequence

import httpx

from pipeline_ai.llm.base import MAX_TOOL_ROUNDS, LLMBackend, LLMResponse, ToolHandler

logger = logging.getLogger(__name__)


class OpenAICompatBackend(LLMBackend):
    """OpenAI-compatible chat completions backend."""

    def __init__(
        self,
        base_url: str,
        model: str,
        api_key: str = "",
        completions_path: str = "/v1/chat/completions",
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._model = model
        self._api_key = api_key
        self._completions_path = completions_path
        self._client: httpx.AsyncClient | None = None

    def _headers(self) -> dict[str, str]:
        if self._api_key:
            return {"Authorization": f"Bearer {self._api_key}"}
        return {}

    def _params(self) -> dict[str, str]:
        return {}

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                headers=self._headers(),
                params=self._params(),
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
        """Call the chat completions endpoint with system + user messages."""
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
            # The last round withholds tools so the model has to answer.
            if use_tools and round_no < MAX_TOOL_ROUNDS:
                payload["tools"] = list(tools)

            logger.debug(
                "OpenAI-compat request: model=%s, prompt_len=%d, round=%d",
                self._model,
                len(user_prompt),
                round_no,
            )

            data = await self._post(client, payload)
            choice = data["choices"][0]["message"]
            usage = data.get("usage") or {}
            prompt_tokens += usage.get("prompt_tokens", 0)
            completion_tokens += usage.get("completion_tokens", 0)

            tool_calls = choice.get("tool_calls") or []
            if tool_calls and use_tools and round_no < MAX_TOOL_ROUNDS:
                messages.append({
                    "role": "assistant",
                    "content": choice.get("content"),
                    "tool_calls": tool_calls,
                })
                messages.extend(self._run_tool_calls(tool_calls, tool_handler))
                tool_calls_made += len(tool_calls)
                continue

            return LLMResponse(
                content=choice.get("content") or "",
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
        resp = await client.post(self._completions_path, json=payload)
        if resp.status_code != 200:
            try:
                err_data = resp.json()
                err_msg = err_data.get("error", {}).get("message", resp.text)
            except Exception:
                err_msg = resp.text
            raise RuntimeError(f"API error ({resp.status_code}): {err_msg}")

        if not resp.content or not resp.content.strip():
            raise RuntimeError(
                f"API returned an empty response (status {resp.status_code}). "
                f"Check that the endpoint ({self._base_url}) is correct."
            )

        try:
            data = resp.json()
        except ValueError:
            preview = resp.text[:200] if resp.text else "(empty)"
            raise RuntimeError(
                f"API returned non-JSON response: {preview}... "
                f"Check that the endpoint ({self._base_url}) is correct."
            )

        if not isinstance(data, dict) or not data.get("choices"):
            keys = list(data.keys()) if isinstance(data, dict) else type(data).__name__
            raise RuntimeError(
                f"Unexpected API response format (missing 'choices'). Got keys: {keys}."
            )
        return data

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
