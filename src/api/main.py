import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI

from src.api.deps import get_context, get_settings
from src.app_shell.config import validate_startup

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    # Rules and schema problems fail fast here rather than on the first request
    ctx = get_context()
    logger.info("Rules loaded from %s", get_settings().rules_path)
    validate_startup(ctx.settings, ctx.rules)

    yield

    join = getattr(ctx.task_runner, "join", None)
    if join is not None:
        join()


app = FastAPI(
    title="Editorial Gate API",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# --- Routers ---
from src.api.routes import publishing  # noqa: E402

app.include_router(publishing.router, prefix="/api/articles", tags=["Publishing"])


@app.get("/health")
def health_check() -> dict[str, Any]:
    """Health check endpoint."""
    return {"status": "ok", "service": "editorial-gate"}
