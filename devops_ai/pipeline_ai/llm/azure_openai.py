"""Azure OpenAI backend: deployment-scoped chat completions with api-key auth."""

from __future__ import annotations

from pipeline_ai.llm.openai_compat import OpenAICompatBackend

DEFAULT_API_VERSION = "2024-10-21"


class AzureOpenAIBackend(OpenAICompatBackend):
    """Chat completions against an Azure OpenAI resource deployment."""

    def __init__(
        self,
        endpoint: str,
        deployment: str,
        api_key: str,
        api_version: str = DEFAULT_API_VERSION,
    ) -> None:
        super().__init__(
            base_url=endpoint,
            model=deployment,
            api_key=api_key,
            completions_path=f"/openai/deployments/{deployment}/chat/completions",
        )
        self._api_version = api_version

    def _headers(self) -> dict[str, str]:
        return {"api-key": self._api_key}

    def _params(self) -> dict[str, str]:
        return {"api-version": self._api_version}
