from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional
import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException

from string_analyzer.api.routes import router
from string_analyzer.config import Settings, get_settings
from string_analyzer.database import Database
from string_analyzer.exceptions import DuplicateRecordError, QueryParseError
from string_analyzer.middleware.rate_limiter import RateLimitMiddleware

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def _is_non_string_value(exc: RequestValidationError) -> bool:
    errors = exc.errors()
    return bool(errors) and all(
        error["type"] == "string_type"
        and tuple(error["loc"]) == ("body", "value")
        and error.get("input") is not None
        for error in errors
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Initializing database...")
        database = Database(settings.database_url)
        database.init()
        app.state.database = database
        try:
            yield
        finally:
            database.dispose()

    app = FastAPI(
        title="String Analyzer Service",
        description="Analyze and store string properties",
        version="1.0.0",
        lifespan=lifespan
    )
    app.state.settings = settings

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if settings.rate_limit_enabled:
        app.add_middleware(
            RateLimitMiddleware,
            limit=settings.rate_limit_requests,
            window_seconds=settings.rate_limit_window_seconds,
        )

    app.include_router(router, tags=["strings"])

    @app.get("/")
    def root():
        """Root endpoint"""
        return {
            "message": "String Analyzer Service",
            "version": "1.0.0",
            "endpoints": {
                "POST /strings": "Analyze and store a string",
                "GET /strings/{string_value}": "Get specific string analysis",
                "GET /strings": "Get all strings with optional filters",
                "GET /strings/filter-by-natural-language": "Filter using natural language",
                "DELETE /strings/{string_value}": "Delete a string"
            }
        }

    @app.get("/health")
    def health_check():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat()
        }

    # Validation error handler
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        if _is_non_string_value(exc):
            return JSONResponse(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                content={"error": 'Invalid data type for "value" (must be string)'}
            )

        errors = {}
        for error in exc.errors():
            field = error['loc'][-1]
            errors[str(field)] = error['msg']

        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "error": "Invalid request body or query parameters",
                "details": errors
            }
        )

    @app.exception_handler(QueryParseError)
    async def query_parse_exception_handler(request: Request, exc: QueryParseError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": str(exc)}
        )

    @app.exception_handler(DuplicateRecordError)
    async def duplicate_exception_handler(request: Request, exc: DuplicateRecordError):
        logger.info(f"Rejected duplicate string {exc.sha256_hash}")
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content={"error": str(exc)}
        )

    # HTTPException handler
    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        # If detail is already a dict with 'error' key, return as is
        if isinstance(exc.detail, dict) and 'error' in exc.detail:
            return JSONResponse(
                status_code=exc.status_code,
                content=exc.detail
            )
        # Otherwise wrap it
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)}
        )

    # Generic error handler
    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled exception: {exc}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": "Internal server error"
            }
        )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("string_analyzer.main:app", host="0.0.0.0", port=get_settings().port)
