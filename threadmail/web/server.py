"""FastAPI application: mounts the API routers and maps application errors to JSON responses."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from threadmail.config import DEPLOYMENT_ENVIRONMENT
from threadmail.db import init_db
from threadmail.errors import StoreError, ThreadmailError
from threadmail.utils.logger import bind_context, clear_context, get_logger
from threadmail.web.compose_routes import router as compose_router
from threadmail.web.mail_routes import router as mail_router
from threadmail.web.template_routes import router as template_router
from threadmail.web.user_routes import router as user_router

logger = get_logger("threadmail.web.server")


@asynccontextmanager
async def _lifespan(app: FastAPI):
    init_db()
    logger.info("server.startup", environment=DEPLOYMENT_ENVIRONMENT)
    yield
    logger.info("server.shutdown")


def create_app() -> FastAPI:
    app = FastAPI(title="Threadmail", version="0.1.0", lifespan=_lifespan)

    @app.middleware("http")
    async def request_context(request: Request, call_next):
        clear_context()
        bind_context(method=request.method, path=request.url.path)
        try:
            return await call_next(request)
        finally:
            clear_context()

    @app.exception_handler(ThreadmailError)
    async def handle_app_error(request: Request, exc: ThreadmailError) -> JSONResponse:
        if isinstance(exc, StoreError):
            logger.error("server.store_error", path=request.url.path, error=str(exc.__cause__ or exc))
        else:
            logger.info("server.request_rejected", path=request.url.path, status=exc.status_code, error=exc.message)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    app.include_router(user_router)
    app.include_router(template_router)
    app.include_router(mail_router)
    app.include_router(compose_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return app
