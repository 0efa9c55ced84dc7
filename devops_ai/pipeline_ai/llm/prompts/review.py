"""Review prompt template for LLM-powered pipeline analysis."""

from __future__ import annotations

from pipeline_ai.analyzer.models import AnalysisRequest

DEFAULT_FILE_NAME = "pipeline.yml"

REVIEW_SYSTEM_PROMPT = """\
You are a senior DevOps engineer specializing in CI/CD pipelines for .NET applications.
Your task is to analyze pipeline YAML files and provide actionable feedback.
Your response MUST be a valid JSON object. Do not include markdown formatting.
Severity levels: Error = must fix, Warning = should fix, Info = nice to have.
Be specific and actionable in suggestions.
You may call the analyze_pipeline_structure and get_best_practices tools \
to inspect the pipeline before answering."""

RESPONSE_SCHEMA = """\
{
    "summary": "A 2-3 sentence overview",
    "issues": [
        {
            "severity": "Error|Warning|Info",
            "category": "Security|Performance|Quality|Reliability|Maintainability",
            "message": "Description",
            "suggestion": "Fix",
            "lineReference": "Optional hint"
        }
    ],
    "suggestedYaml": "Improved YAML or null",
    "metadata": {
        "jobCount": 0,
        "stepCount": 0,
        "hasTests": false,
        "hasCaching": false,
        "hasSecurityScanning": false,
        "hasArtifactPublishing": false,
        "detectedTools": []
    }
}"""


def build_review_user_prompt(request: AnalysisRequest) -> str:
    """Build the user prompt for a pipeline review.

    The YAML is embedded verbatim; a ``` sequence inside it is not escaped.
    """
    file_name = request.file_name or DEFAULT_FILE_NAME
    return (
        f"Please analyze this {request.platform.value} pipeline:\n\n"
        f"Filename: {file_name}\n\n"
        f"```yaml\n{request.yaml_content}\n```\n\n"
        f"Provide your analysis as JSON with this structure:\n"
        f"{RESPONSE_SCHEMA}"
    )


def build_messages(request: AnalysisRequest) -> tuple[str, str]:
    """Return the (system, user) message pair for a review request."""
    return REVIEW_SYSTEM_PROMPT, build_review_user_prompt(request)
