"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from fitness_coach.api.diet_plans import router as diet_plans_router
from fitness_coach.api.food_entries import router as food_entries_router
from fitness_coach.api.poses import router as poses_router
from fitness_coach.api.profiles import router as profiles_router
from fitness_coach.api.responses import error_body
from fitness_coach.app_logging import configure_logging
from fitness_coach.containers import AppContainer
from fitness_coach.domain.errors import FitnessCoachError


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(diet_plans_router)
    app.include_router(profiles_router)
    app.include_router(food_entries_router)
    app.include_router(poses_router)

    @app.exception_handler(FitnessCoachError)
    async def handle_fitness_coach_error(
        request: Request, exc: FitnessCoachError
    ) -> JSONResponse:
        if exc.status_code >= 500:  # noqa: PLR2004
            logger.error(
                "Request failed: %s", exc.message, extra={"path": request.url.path}
            )
        return JSONResponse(status_code=exc.status_code, content=error_body(exc))

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app

