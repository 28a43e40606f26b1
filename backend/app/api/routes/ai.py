"""AI analysis and task breakdown routes."""
from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, Request
from fastapi.responses import JSONResponse

from app.api.dependencies import (
    ANALYSIS_GROUP,
    BREAKDOWN_GROUP,
    RateLimit,
    get_app_settings,
    get_llm_gateway,
    rate_limit_headers,
)
from app.api.schemas.ai import AnalysisResult, BreakdownResult, ErrorBody
from app.core.config import Settings
from app.core.errors import AIServiceError
from app.observability.tracing import trace
from app.services.error_classifier import classify_error
from app.services.input_validation import parse_breakdown_request, parse_todos
from app.services.llm_gateway import CompletionGateway
from app.services.rate_limiter import RateLimitDecision
from app.services.task_breakdown import generate_task_breakdown
from app.services.todo_analysis import analyze_todos

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/todos", tags=["ai"])

ERROR_RESPONSES: Dict[int | str, Dict[str, Any]] = {
    code: {"model": ErrorBody} for code in (400, 429, 500, 502, 503, 504)
}


@router.post(
    "/analyze",
    response_model=AnalysisResult,
    response_model_exclude_none=True,
    responses=ERROR_RESPONSES,
)
async def analyze_todos_endpoint(
    http_request: Request,
    payload: Dict[str, Any] = Body(...),
    decision: RateLimitDecision = Depends(RateLimit(ANALYSIS_GROUP)),
    gateway: CompletionGateway = Depends(get_llm_gateway),
    app_settings: Settings = Depends(get_app_settings),
):
    """Summarize the submitted todo list and suggest priorities."""
    request_id = getattr(http_request.state, "request_id", None)
    try:
        todos = parse_todos(payload)
        with trace("ai.analyze", metadata={"route": "/todos/analyze", "todo_count": len(todos)}, request_id=request_id):
            return await analyze_todos(todos, gateway, app_settings, request_id=request_id)
    except AIServiceError as exc:
        return _error_response(exc, "analysis", decision)


@router.post(
    "/breakdown",
    response_model=BreakdownResult,
    response_model_exclude_none=True,
    responses=ERROR_RESPONSES,
)
async def breakdown_task_endpoint(
    http_request: Request,
    payload: Dict[str, Any] = Body(...),
    decision: RateLimitDecision = Depends(RateLimit(BREAKDOWN_GROUP)),
    gateway: CompletionGateway = Depends(get_llm_gateway),
    app_settings: Settings = Depends(get_app_settings),
):
    """Break a high-level goal into concrete suggested tasks."""
    request_id = getattr(http_request.state, "request_id", None)
    try:
        breakdown_request = parse_breakdown_request(payload)
        with trace("ai.breakdown", metadata={"route": "/todos/breakdown"}, request_id=request_id):
            return await generate_task_breakdown(breakdown_request, gateway, app_settings, request_id=request_id)
    except AIServiceError as exc:
        return _error_response(exc, "breakdown", decision)


def _error_response(exc: AIServiceError, feature: str, decision: RateLimitDecision) -> JSONResponse:
    classified = classify_error(exc, feature)
    if classified.status_code >= 500:
        logger.warning("%s request failed: %s (%s)", feature, type(exc).__name__, exc.message)
    return JSONResponse(
        status_code=classified.status_code,
        content=classified.body,
        headers=rate_limit_headers(decision),
    )
