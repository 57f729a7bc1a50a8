# taskmaster/main.py

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from taskmaster.api.v1.api import api_router
from taskmaster.core.config import settings
from taskmaster.core.errors import TaskMasterError
from taskmaster.core.logging_setup import setup_logging
from taskmaster.db.init_db import init_db, seed_initial_data
from taskmaster.db.session import SessionLocal

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    db = SessionLocal()
    try:
        seed_initial_data(db, settings)
    finally:
        db.close()
    logger.info("%s %s started (%s)", settings.PROJECT_NAME, settings.VERSION, settings.environment)
    yield


async def handle_taskmaster_error(request: Request, exc: TaskMasterError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


def create_application() -> FastAPI:
    setup_logging(settings.log_level)

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        debug=settings.debug,
        lifespan=lifespan,
    )

    # ---------- CORS ----------
    # credentials=True so the browser sends the access_token cookie
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.backend_cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ---------- ERRORS ----------
    app.add_exception_handler(TaskMasterError, handle_taskmaster_error)

    # ---------- ROUTERS ----------
    app.include_router(api_router, prefix=settings.api_v1_prefix)

    @app.get("/healthz", tags=["health"])
    def healthz():
        return {"status": "ok"}

    return app


app = create_application()
