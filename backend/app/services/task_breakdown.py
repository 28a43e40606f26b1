"""AI decomposition of a goal into suggested tasks."""
from __future__ import annotations

import logging

from app.api.schemas.ai import BreakdownRequest, BreakdownResult
from app.core.config import Settings
from app.observability.metrics import log_metric
from app.services.input_validation import sanitize_input, validate_goal
from app.services.llm_gateway import CompletionGateway, CompletionRequest
from app.services.prompts import build_breakdown_prompts, resolve_max_tasks
from app.services.response_parsing import extract_json_object
from app.services.response_validation import validate_breakdown_payload

logger = logging.getLogger(__name__)

FEATURE = "breakdown"
REQUEST_TITLE = "Todo List Task Breakdown"


async def generate_task_breakdown(
    request: BreakdownRequest,
    gateway: CompletionGateway,
    settings: Settings,
    *,
    request_id: str | None = None,
) -> BreakdownResult:
    """Ask the provider for sub-tasks and keep only the well-formed ones.

    Raises ValidationError for a bad goal, EmptyResultError when every
    suggested task is dropped, and whatever the gateway raises otherwise.
    """
    validate_goal(request.goal)
    goal = sanitize_input(request.goal)
    context = sanitize_input(request.context) if request.context else None
    max_tasks = resolve_max_tasks(request.max_tasks, settings.task_breakdown_max_tasks)

    system_prompt, user_prompt = build_breakdown_prompts(goal, context, max_tasks)
    content = await gateway.complete(
        CompletionRequest(
            system_prompt=system_prompt,
            user_prompt=user_prompt,
            model=settings.ai_model,
            max_tokens=settings.task_breakdown_max_tokens,
            timeout_s=settings.breakdown_timeout_s,
            feature=FEATURE,
            title=REQUEST_TITLE,
            temperature=settings.ai_temperature,
        ),
        request_id=request_id,
    )

    validated = validate_breakdown_payload(extract_json_object(content))
    kept = len(validated.suggested_tasks)
    if validated.dropped_count:
        logger.info("Dropped %d malformed suggested tasks (kept %d)", validated.dropped_count, kept)
    log_metric("ai.breakdown.tasks_kept", kept)
    log_metric("ai.breakdown.tasks_dropped", validated.dropped_count)

    return BreakdownResult(
        goal=goal,
        suggested_tasks=validated.suggested_tasks,
        reasoning=validated.reasoning,
    )
