"""Main FastAPI application for the Stepwise backend."""
import logging

from fastapi import FastAPI, Request

from stepwise.api.routes.activity import router as activity_router
from stepwise.api.routes.goals import router as goals_router
from stepwise.api.routes.task import router as task_router
from stepwise.core.config import settings
from stepwise.core.logging import configure_logging
from stepwise.core.middleware import RequestIDMiddleware
from stepwise.db.base import Base
from stepwise.db.session import engine
from stepwise.observability.client import init_opik
from stepwise.observability.tracing import trace

configure_logging(log_level=settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name, version="0.1.0", debug=settings.debug)
app.add_middleware(RequestIDMiddleware)
app.include_router(goals_router)
app.include_router(task_router)
app.include_router(activity_router)


@app.on_event("startup")
async def startup() -> None:
    """Initialise observability and, when configured, the local schema."""
    init_opik()
    if settings.database_auto_create:
        from stepwise.db import models  # noqa: F401  (register tables)

        Base.metadata.create_all(bind=engine)
        logger.info("Database schema ensured at %s", engine.url.render_as_string(hide_password=True))


@app.get("/health", tags=["health"], summary="Readiness probe")
async def health_check(request: Request) -> dict[str, str]:
    """Return a simple status payload so automation can probe the API."""
    with trace("http.health_check", metadata={"route": "/health"}, request_id=request.state.request_id):
        return {"status": "ok"}
