"""Provider configuration: settings file layered with environment overrides."""

from __future__ import annotations

import json
import logging
import os
from enum import Enum
from pathlib import Path
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

SETTINGS_SECTION = "Ai"
DEFAULT_SETTINGS_FILE = "appsettings.json"
SETTINGS_PATH_ENV = "DEVOPS_AI_SETTINGS"

# Environment variables override the settings file, mirroring the
# Section__Key naming of the JSON layout.
_ENV_OVERRIDES = {
    "Provider": "AI__PROVIDER",
    "Model": "AI__MODEL",
    "Endpoint": "AI__ENDPOINT",
    "DeploymentName": "AI__DEPLOYMENTNAME",
    "ApiKeyEnvironmentVariable": "AI__APIKEYENVIRONMENTVARIABLE",
}


class ConfigError(RuntimeError):
    """Raised when provider configuration is missing or invalid."""


class ProviderKind(str, Enum):
    """Supported chat-completion providers."""

    openai = "openai"
    azure_openai = "azureopenai"
    ollama = "ollama"
    github_models = "githubmodels"

    @classmethod
    def parse(cls, value: str | ProviderKind | None) -> ProviderKind:
        """Match a provider tag case-insensitively.

        Unknown or empty tags select the direct OpenAI provider.
        """
        if isinstance(value, ProviderKind):
            return value
        tag = (value or "").strip().lower()
        for member in cls:
            if member.value == tag:
                return member
        if tag:
            logger.warning("Unknown provider %r, falling back to OpenAI", value)
        return cls.openai


class ProviderConfig(BaseModel):
    """Read-only provider settings, loaded once per process."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    provider: ProviderKind = Field(default=ProviderKind.openai, alias="Provider")
    model: str = Field(default="gpt-4o-mini", alias="Model")
    endpoint: str | None = Field(default=None, alias="Endpoint")
    deployment_name: str | None = Field(default=None, alias="DeploymentName")
    api_key_env_var: str = Field(
        default="OPENAI_API_KEY", alias="ApiKeyEnvironmentVariable",
    )

    @field_validator("provider", mode="before")
    @classmethod
    def _parse_provider(cls, value: Any) -> ProviderKind:
        if value is None or isinstance(value, (str, ProviderKind)):
            return ProviderKind.parse(value)
        return ProviderKind.parse(str(value))

    @field_validator("endpoint", "deployment_name", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


def load_config(
    path: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> ProviderConfig:
    """Load provider settings.

    The settings file is ``path`` if given, else ``$DEVOPS_AI_SETTINGS``,
    else ``appsettings.json`` in the working directory. A missing default
    file is not an error; a missing explicit file is.
    """
    env = os.environ if environ is None else environ

    explicit = path is not None or bool(env.get(SETTINGS_PATH_ENV))
    settings_path = Path(path or env.get(SETTINGS_PATH_ENV) or DEFAULT_SETTINGS_FILE)

    values: dict[str, Any] = {}
    if settings_path.exists():
        values.update(_read_section(settings_path))
        logger.debug("Loaded settings from %s", settings_path)
    elif explicit:
        raise ConfigError(f"Settings file not found: {settings_path}")

    for key, env_name in _ENV_OVERRIDES.items():
        if env.get(env_name):
            values[key] = env[env_name]

    try:
        config = ProviderConfig.model_validate(values)
    except ValidationError as e:
        raise ConfigError(f"Invalid AI configuration: {e}") from e

    logger.info(
        "AI provider configured: provider=%s, model=%s, endpoint=%s",
        config.provider.value,
        config.model,
        config.endpoint or "(default)",
    )
    return config


def _read_section(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8") or "{}")
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Failed to read {path.name}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"{path.name} must contain a JSON object at the root")

    section = data.get(SETTINGS_SECTION, {})
    if not isinstance(section, dict):
        raise ConfigError(f"'{SETTINGS_SECTION}' in {path.name} must be an object")
    return section
