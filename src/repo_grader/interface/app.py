"""FastAPI application factory."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from repo_grader.interface.dependencies import shutdown, startup
from repo_grader.interface.error_handlers import register_error_handlers
from repo_grader.interface.routes import router


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    await startup()
    yield
    await shutdown()


def create_app() -> FastAPI:
    """Build and wire the FastAPI application."""
    app = FastAPI(
        title="Repo Grader",
        version="1.0.0",
        description=(
            "Grades a public GitHub repository: a 0-100 score, a level, "
            "strengths, weaknesses and an improvement roadmap.  Uses a "
            "generative model when one is configured and a deterministic "
            "rule set otherwise."
        ),
        lifespan=_lifespan,
    )

    register_error_handlers(app)
    app.include_router(router)

    @app.get("/health", include_in_schema=False)
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return app
