"""Main FastAPI application for the Todo AI backend."""
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from app.api.dependencies import build_rate_limiters, close_llm_gateway
from app.api.exception_handlers import register_exception_handlers
from app.api.routes.ai import router as ai_router
from app.api.routes.todos import router as todos_router
from app.core.config import settings
from app.core.logging import configure_logging
from app.core.middleware import RequestIDMiddleware
from app.db.session import init_db
from app.observability.client import init_opik
from app.observability.tracing import trace
from app.worker.rate_limit_sweeper import start_sweep_scheduler

configure_logging(log_level=settings.log_level)

app = FastAPI(title=settings.app_name, version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-Id", "Retry-After", "X-RateLimit-Limit", "X-RateLimit-Remaining", "X-RateLimit-Reset"],
)
app.add_middleware(RequestIDMiddleware)
register_exception_handlers(app)

# AI routes first so /todos/analyze and /todos/breakdown never hit /todos/{todo_id}.
app.include_router(ai_router)
app.include_router(todos_router)

app.state.rate_limiters = build_rate_limiters(settings)
app.state.sweep_scheduler = None


@app.on_event("startup")
async def startup() -> None:
    """Initialize observability, storage, and the rate-limit sweep."""
    init_opik()
    if settings.db_create_all:
        init_db()
    if settings.rate_limit_sweep_enabled:
        app.state.sweep_scheduler = start_sweep_scheduler(app.state, settings.rate_limit_sweep_interval_s)


@app.on_event("shutdown")
async def shutdown() -> None:
    scheduler = app.state.sweep_scheduler
    if scheduler is not None and scheduler.running:
        scheduler.shutdown(wait=False)
    app.state.sweep_scheduler = None
    await close_llm_gateway()


@app.get("/health", tags=["health"], summary="Readiness probe")
async def health_check(request: Request) -> dict[str, str]:
    """Return a simple status payload so automation can probe the API."""
    with trace("http.health_check", metadata={"route": "/health"}, request_id=request.state.request_id):
        return {"status": "ok"}
