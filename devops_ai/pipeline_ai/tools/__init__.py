"""Deterministic pipeline helpers, also exposed to the model as tools."""

from pipeline_ai.tools.best_practices import get_best_practices, get_best_practices_json
from pipeline_ai.tools.registry import TOOL_DEFINITIONS, invoke_tool
from pipeline_ai.tools.structure import analyze_pipeline_structure, extract_metadata

__all__ = [
    "TOOL_DEFINITIONS",
    "analyze_pipeline_structure",
    "extract_metadata",
    "get_best_practices",
    "get_best_practices_json",
    "invoke_tool",
]
