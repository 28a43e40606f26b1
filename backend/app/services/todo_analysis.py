"""AI workload analysis for a todo list."""
from __future__ import annotations

import logging
from typing import Sequence

from app.api.schemas.ai import AnalysisResult, TodoInput
from app.core.config import Settings
from app.observability.metrics import log_metric
from app.services.llm_gateway import CompletionGateway, CompletionRequest
from app.services.prompts import build_analysis_prompts
from app.services.response_parsing import extract_json_object
from app.services.response_validation import coerce_analysis_result

logger = logging.getLogger(__name__)

FEATURE = "analysis"
REQUEST_TITLE = "Todo List AI Analysis"

EMPTY_LIST_RESULT = AnalysisResult(
    summary="You have no todos yet. Start by adding your first task!",
    insights=["Your todo list is empty", "Consider adding tasks to track your work"],
    priority_suggestions=[],
)


async def analyze_todos(
    todos: Sequence[TodoInput],
    gateway: CompletionGateway,
    settings: Settings,
    *,
    request_id: str | None = None,
) -> AnalysisResult:
    """Summarize a todo list; an empty list never reaches the provider."""
    if not todos:
        return EMPTY_LIST_RESULT.model_copy(deep=True)

    system_prompt, user_prompt = build_analysis_prompts(todos)
    content = await gateway.complete(
        CompletionRequest(
            system_prompt=system_prompt,
            user_prompt=user_prompt,
            model=settings.ai_model,
            max_tokens=settings.ai_max_tokens,
            timeout_s=settings.analysis_timeout_s,
            feature=FEATURE,
            title=REQUEST_TITLE,
            temperature=settings.ai_temperature,
        ),
        request_id=request_id,
    )

    result = coerce_analysis_result(extract_json_object(content))
    logger.info("Analyzed %d todos (%d insights)", len(todos), len(result.insights))
    log_metric("ai.analysis.success", 1, metadata={"todo_count": len(todos)})
    return result
