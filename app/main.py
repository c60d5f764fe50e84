from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from botocore.exceptions import ClientError
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles

from app.core.log import configure_logging
from app.core.settings import S
from app.core.tables import Database
from app.metrics import METRICS_ENABLED, metrics_endpoint, metrics_middleware, set_app_info
from app.routers.auth import router as auth_router
from app.routers.comments import router as comments_router
from app.routers.misc import router as misc_router
from app.routers.notifications import router as notifications_router
from app.routers.posts import router as posts_router
from app.routers.uploads import router as uploads_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    logger.info("Blogify backend starting in %s mode", S.app_env)
    yield
    app.state.db.close()


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"detail": "Invalid request", "errors": jsonable_encoder(exc.errors())},
    )


async def storage_error_handler(request: Request, exc: ClientError) -> JSONResponse:
    logger.error("Storage error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Server error"})


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Something went wrong!"})


def create_app(db: Database | None = None) -> FastAPI:
    app = FastAPI(title="Blogify backend", version="0.1.0", lifespan=lifespan)
    app.state.db = db or Database()
    static_dir = Path(__file__).resolve().parent / "static"

    app.mount("/static", StaticFiles(directory=static_dir), name="static")

    @app.get("/", include_in_schema=False)
    async def index():
        return FileResponse(static_dir / "index.html")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=S.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    if METRICS_ENABLED:
        app.middleware("http")(metrics_middleware)
        set_app_info(app.title, app.version)
        app.get("/metrics", include_in_schema=False)(metrics_endpoint)

    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(ClientError, storage_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(misc_router)
    app.include_router(auth_router)
    app.include_router(posts_router)
    app.include_router(comments_router)
    app.include_router(notifications_router)
    app.include_router(uploads_router)

    return app


def run() -> None:
    import uvicorn

    uvicorn.run(create_app(), host=S.host, port=S.port, log_level=S.log_level.lower())


app = create_app()

if __name__ == "__main__":
    run()
