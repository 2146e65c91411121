import logging
import time

import anyio.to_thread

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

from vitalgraph.errors import VitalgraphError

from backend.app.config import AppConfig
from backend.app.api.schemas import ApiError, ApiErrorResponse
from backend.app.api.routes_admin import router as admin_router
from backend.app.api.routes_graph import router as graph_router
from backend.app.api.routes_interventions import router as interventions_router
from backend.app.api.routes_suggestions import router as suggestions_router
from backend.app.dependencies import (
    get_intervention_service,
    get_state_store,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifecycle hooks.

    Opens the state store once at startup, records the built-in
    interventions as published versions, and releases the store
    cleanly at shutdown.
    """
    logger = logging.getLogger("vitalgraph.startup")
    t0 = time.perf_counter()

    seeded = await anyio.to_thread.run_sync(get_intervention_service().seed)
    logger.info(
        "[startup] intervention versions %s in %.3fs",
        "seeded" if seeded else "already present",
        time.perf_counter() - t0,
    )

    yield

    await anyio.to_thread.run_sync(get_state_store().close)


async def vitalgraph_error_handler(request: Request, exc: VitalgraphError) -> JSONResponse:
    if exc.status_code >= 500:
        logging.getLogger("vitalgraph.api").error(
            "[api] %s %s failed: %s",
            request.method,
            request.url.path,
            exc.message,
        )
    body = ApiErrorResponse(error=ApiError(code=exc.code, message=exc.message))
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


def create_app(config: AppConfig) -> FastAPI:
    app = FastAPI(
        title=config.app_name,
        lifespan=lifespan,
    )

    app.add_exception_handler(VitalgraphError, vitalgraph_error_handler)

    app.include_router(
        graph_router,
        prefix=f"{config.api_prefix}/graph",
        tags=["graph"],
    )

    app.include_router(
        interventions_router,
        prefix=f"{config.api_prefix}/interventions",
        tags=["interventions"],
    )

    app.include_router(
        suggestions_router,
        prefix=f"{config.api_prefix}/suggestions",
        tags=["suggestions"],
    )

    app.include_router(
        admin_router,
        prefix=f"{config.api_prefix}/developer",
        tags=["developer"],
    )

    return app


config = AppConfig()
app = create_app(config)
