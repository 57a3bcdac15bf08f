"""
halloffame/main.py
FastAPI application factory

The Database is created (or injected) when the app is built, tables are
created on startup, and the engine is disposed on shutdown.
"""
import logging
import uuid
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from halloffame import __version__
from halloffame.config import Settings, get_settings, setup_logging
from halloffame.database import Database
from halloffame.errors import APIError, ErrorCode, code_for_status, error_body
from halloffame.routes import router
from halloffame.security.rbac import limiter

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.LOG_LEVEL)
    database = database or Database.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting application...")
        settings.warn_insecure_defaults()
        try:
            await database.create_all()
            logger.info(f"Database connected successfully ({database.dialect})")
        except Exception as e:
            logger.error(f"Failed to connect to database: {str(e)}")
            raise

        yield

        logger.info("Shutting down application...")
        await database.dispose()

    app = FastAPI(
        title="Hall of Fame Nominations API",
        description="Committee ballot and results service",
        version=__version__,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        lifespan=lifespan,
    )
    app.state.database = database
    app.state.settings = settings

    # Attach rate limiter to the app
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError):
        logger.warning(f"API error on {request.url.path}: {exc.code} - {exc.message}")
        return exc.to_response()

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.warning(f"Validation error on {request.url.path}: {exc.errors()}")

        error_details = [
            {
                "loc": list(error.get("loc", ())),
                "msg": error.get("msg"),
                "type": error.get("type"),
            }
            for error in exc.errors()
        ]
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=error_body("Validation Error", ErrorCode.VALIDATION_ERROR, {"errors": error_details}),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        logger.warning(f"HTTP exception on {request.url.path}: {exc.detail}")
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(str(exc.detail), code_for_status(exc.status_code)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        log_id = str(uuid.uuid4())[:8]
        logger.error(
            f"[{log_id}] Unhandled exception on {request.url.path}: {type(exc).__name__}: {str(exc)}",
            exc_info=exc,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_body(
                "An unexpected error occurred. Please try again later.",
                ErrorCode.INTERNAL_ERROR,
                {"log_id": log_id},
            ),
        )

    app.include_router(router, prefix="/api")
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("halloffame.main:app", host="0.0.0.0", port=3001)
