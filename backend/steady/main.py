"""Main FastAPI application for the Steady backend."""
from fastapi import FastAPI, Request

from steady.api.routes.cron import router as cron_router
from steady.api.routes.dashboard import router as dashboard_router
from steady.api.routes.jobs import router as jobs_router
from steady.api.routes.notifications import router as notifications_router
from steady.api.routes.progress_logs import router as progress_logs_router
from steady.api.routes.resolution import router as resolution_router
from steady.api.routes.settings import router as settings_router
from steady.core.config import settings
from steady.core.logging import configure_logging
from steady.core.middleware import RequestIDMiddleware
from steady.observability.client import init_opik
from steady.observability.tracing import trace

configure_logging(log_level=settings.log_level)

app = FastAPI(title=settings.app_name, version="0.1.0")
app.add_middleware(RequestIDMiddleware)
app.include_router(resolution_router)
app.include_router(progress_logs_router)
app.include_router(settings_router)
app.include_router(dashboard_router)
app.include_router(cron_router)
app.include_router(jobs_router)
app.include_router(notifications_router)


@app.on_event("startup")
async def startup() -> None:
    """Initialize observability and, when configured, the schema."""
    init_opik()
    if settings.auto_create_schema:
        from steady.db import Base
        from steady.db.session import engine

        Base.metadata.create_all(bind=engine)


@app.get("/health", tags=["health"], summary="Readiness probe")
async def health_check(request: Request) -> dict[str, str]:
    """Return a simple status payload so automation can probe the API."""
    with trace("http.health_check", metadata={"route": "/health"}, request_id=request.state.request_id):
        return {"status": "ok"}
