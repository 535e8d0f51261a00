from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from trasporti.core.config import Settings, get_settings
from trasporti.core.exceptions import AppException
from trasporti.core.logging import get_logger, setup_logging
from trasporti.infrastructure.db.connection import DatabaseManager
from trasporti.interfaces.http.middleware import LoggingMiddleware
from trasporti.interfaces.http.routes import api_router

logger = get_logger(__name__)


def create_application(
    settings: Optional[Settings] = None,
    database_manager: Optional[DatabaseManager] = None,
) -> FastAPI:
    settings = settings or get_settings()
    database = database_manager or DatabaseManager(settings.database)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        setup_logging(settings)
        logger.info("Starting application...")

        await database.connect()
        app.state.database = database
        app.state.settings = settings
        logger.info("Database connection established")

        try:
            yield
        finally:
            logger.info("Shutting down...")
            await database.disconnect()
            logger.info("Database connection closed")

    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="Transport records administration API",
        version=settings.VERSION,
        debug=settings.DEBUG,
        lifespan=lifespan,
    )

    app.add_middleware(LoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_settings.allowed_origins,
        allow_credentials=settings.cors_settings.allow_credentials,
        allow_methods=settings.cors_settings.allowed_methods,
        allow_headers=settings.cors_settings.allowed_headers,
    )

    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
        """Handle application-specific exceptions."""
        if exc.status_code >= 500:
            logger.error(f"{exc.error_code} on {request.url.path}: {exc.message}")
            message = "Internal server error occurred"
            details = {}
        else:
            message = exc.message
            details = exc.details
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": {
                    "type": exc.error_code,
                    "message": message,
                    "details": details,
                }
            },
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """Malformed requests are plain 400s."""
        errors = [
            {"loc": list(error.get("loc", [])), "msg": error.get("msg")}
            for error in exc.errors()
        ]
        return JSONResponse(
            status_code=400,
            content={
                "error": {
                    "type": "VALIDATION_ERROR",
                    "message": "Invalid request",
                    "details": {"errors": errors},
                }
            },
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle general exceptions."""
        logger.exception(f"Unhandled error on {request.url.path}: {exc}")
        return JSONResponse(
            status_code=500,
            content={
                "error": {
                    "type": "internal_server_error",
                    "message": "Internal server error occurred",
                }
            },
        )

    @app.get("/health")
    async def health_check(request: Request) -> dict:
        """Health check endpoint."""
        healthy = await request.app.state.database.health_check()
        return {
            "status": "healthy" if healthy else "unhealthy",
            "version": settings.VERSION,
            "checks": {"database": "healthy" if healthy else "unhealthy"},
        }

    app.include_router(api_router)

    return app


def main():
    settings = get_settings()
    uvicorn.run(
        "trasporti.main:create_application",
        factory=True,
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level="info" if not settings.DEBUG else "debug",
        access_log=True,
        server_header=False,
    )


if __name__ == "__main__":
    main()
