"""Function-tool schemas offered to the model, and their dispatcher."""

from __future__ import annotations

import json
import logging
from typing import Any, Callable

from pipeline_ai.tools.best_practices import get_best_practices_json
from pipeline_ai.tools.structure import analyze_pipeline_structure

logger = logging.getLogger(__name__)

_PLATFORM_PARAM = {
    "type": "string",
    "description": "The platform: AzureDevOps or GitHubActions",
}

TOOL_DEFINITIONS: list[dict[str, Any]] = [
    {
        "type": "function",
        "function": {
            "name": "analyze_pipeline_structure",
            "description": (
                "Analyzes the structure of a CI/CD pipeline YAML and returns "
                "metadata about jobs, steps, and detected patterns."
            ),
            "parameters": {
                "type": "object",
                "properties": {
                    "yaml_content": {
                        "type": "string",
                        "description": "The raw YAML content of the pipeline",
                    },
                    "platform": _PLATFORM_PARAM,
                },
                "required": ["yaml_content", "platform"],
            },
        },
    },
    {
        "type": "function",
        "function": {
            "name": "get_best_practices",
            "description": (
                "Returns a list of best practices and common issues to check "
                "for the given pipeline platform."
            ),
            "parameters": {
                "type": "object",
                "properties": {"platform": _PLATFORM_PARAM},
                "required": ["platform"],
            },
        },
    },
]

_HANDLERS: dict[str, Callable[..., str]] = {
    "analyze_pipeline_structure": analyze_pipeline_structure,
    "get_best_practices": get_best_practices_json,
}


def invoke_tool(name: str, arguments: dict[str, Any]) -> str:
    """Run a tool requested by the model. Failures come back as JSON errors."""
    handler = _HANDLERS.get(name)
    if handler is None:
        logger.warning("Model requested unknown tool %r", name)
        return json.dumps({"error": f"Unknown tool: {name}"})

    try:
        return handler(**arguments)
    except TypeError as e:
        logger.warning("Bad arguments for tool %s: %s", name, e)
        return json.dumps({"error": f"Invalid arguments for {name}: {e}"})
