"""Build the chat backend selected by the provider configuration."""

from __future__ import annotations

import logging
import os
from typing import Mapping

from pipeline_ai.config import ConfigError, ProviderConfig, ProviderKind
from pipeline_ai.llm.azure_openai import AzureOpenAIBackend
from pipeline_ai.llm.base import LLMBackend
from pipeline_ai.llm.ollama import OllamaBackend
from pipeline_ai.llm.openai_compat import OpenAICompatBackend

logger = logging.getLogger(__name__)

OPENAI_ENDPOINT = "https://api.openai.com"
OLLAMA_ENDPOINT = "http://localhost:11434"
GITHUB_MODELS_ENDPOINT = "https://models.inference.ai.azure.com"


def create_backend(
    config: ProviderConfig,
    environ: Mapping[str, str] | None = None,
) -> LLMBackend:
    """Construct the backend for ``config.provider``.

    No request is made here. Missing required settings raise ConfigError.
    """
    env = os.environ if environ is None else environ
    provider = config.provider

    if provider is ProviderKind.azure_openai:
        backend: LLMBackend = _create_azure_openai(config, env)
    elif provider is ProviderKind.ollama:
        backend = OllamaBackend(
            base_url=config.endpoint or OLLAMA_ENDPOINT,
            model=config.model,
        )
    elif provider is ProviderKind.github_models:
        backend = OpenAICompatBackend(
            base_url=config.endpoint or GITHUB_MODELS_ENDPOINT,
            model=config.model,
            api_key=_require_api_key(config, env),
            completions_path="/chat/completions",
        )
    elif provider is ProviderKind.openai:
        backend = _create_openai(config, env)
    else:
        logger.warning("No backend for provider %s, using OpenAI", provider)
        backend = _create_openai(config, env)

    logger.debug(
        "Created %s for provider=%s, model=%s",
        type(backend).__name__,
        provider.value,
        backend.model_name,
    )
    return backend


def _create_openai(config: ProviderConfig, env: Mapping[str, str]) -> LLMBackend:
    # Endpoint is ignored: it may be left over from an Azure configuration.
    if config.endpoint:
        logger.debug("Ignoring endpoint %s for the OpenAI provider", config.endpoint)
    return OpenAICompatBackend(
        base_url=OPENAI_ENDPOINT,
        model=config.model,
        api_key=_require_api_key(config, env),
    )


def _create_azure_openai(config: ProviderConfig, env: Mapping[str, str]) -> LLMBackend:
    api_key = _require_api_key(config, env)
    if not config.endpoint:
        raise ConfigError(
            "Azure OpenAI endpoint is required. Set 'Ai:Endpoint' in "
            "configuration or the AI__ENDPOINT environment variable."
        )
    return AzureOpenAIBackend(
        endpoint=config.endpoint,
        deployment=config.deployment_name or config.model,
        api_key=api_key,
    )


def _require_api_key(config: ProviderConfig, env: Mapping[str, str]) -> str:
    api_key = env.get(config.api_key_env_var, "")
    if not api_key:
        raise ConfigError(
            f"API key not found. Set the '{config.api_key_env_var}' "
            "environment variable."
        )
    return api_key
