from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from vidtube.api import api_router
from vidtube.core.config import AppSettings, get_app_settings
from vidtube.core.exceptions import ApiError


_log_handler_id = None


def setup_logging(settings: AppSettings):
    global _log_handler_id
    if _log_handler_id is not None:
        logger.remove(_log_handler_id)
    _log_handler_id = logger.add(
        settings.log_file,
        level=settings.app_log_level.value.upper(),
        rotation=settings.log_rotation,
        compression=settings.log_compression.value,
        format=settings.log_format,
    )


def error_response(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"status": status_code, "message": message, **extra},
    )


def register_exception_handlers(app: FastAPI):
    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError):
        if exc.status_code >= 500:
            logger.opt(exception=exc).error(f"{request.method} {request.url.path} failed: {exc.message}")
        else:
            logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
        return error_response(exc.status_code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = [
            {"field": ".".join(str(part) for part in error["loc"]), "message": error["msg"]}
            for error in exc.errors()
        ]
        logger.debug(f"Validation failed for {request.url.path}: {errors}")
        return error_response(400, "Invalid request", errors=errors)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
        return error_response(500, "Internal server error")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting VidTube API")
    yield
    logger.info("VidTube API stopped")


def create_app():
    settings = get_app_settings()
    app = FastAPI(
        title=settings.app_name,
        description="Video sharing platform API",
        version="1.0.0",
        lifespan=lifespan,
    )
    setup_logging(settings)
    register_exception_handlers(app)

    @app.get("/")
    def read_root():
        return {"message": f"Welcome to {settings.app_name}"}
    @app.get("/health")
    async def health_check():
        return {"status": "ok"}
    app.include_router(api_router, prefix=settings.api_prefix)

    return app


def run():
    settings = get_app_settings()
    uvicorn.run(
        "vidtube.main:create_app",
        factory=True,
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.app_reload,
        log_level=settings.app_log_level.value,
    )


if __name__ == "__main__":
    run()
