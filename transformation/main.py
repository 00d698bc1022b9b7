"""
TenMinuteTransformation API Server.

FastAPI backend for the journaling app: weekly tasks, daily entries,
reflections and weekly reviews, plus derived insights.

Usage:
    uvicorn transformation.main:app --host 0.0.0.0 --port 5000 --reload

The server provides endpoints for:
- Weekly tasks (soft delete, completion toggle)
- Daily entries and week ranges
- Reflections and the prompt catalog
- Weekly reviews
- Streak, weekly stats and activity suggestions
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from transformation import __version__
from transformation.api import API_PREFIX
from transformation.api.daily import router as daily_router
from transformation.api.insights import router as insights_router
from transformation.api.reflections import router as reflections_router
from transformation.api.reviews import router as reviews_router
from transformation.api.tasks import router as tasks_router
from transformation.config import Config
from transformation.errors import StoreError, TransformationError, log_error_with_context
from transformation.storage import create_store

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def _message(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message})


def register_exception_handlers(app: FastAPI) -> None:
    """Every error response is ``{"message": ...}``."""

    @app.exception_handler(TransformationError)
    async def transformation_error_handler(request: Request, exc: TransformationError):
        log_error_with_context(exc, component="api", additional_context={"path": request.url.path})
        if isinstance(exc, StoreError) or exc.status_code >= 500:
            return _message(500, "Internal server error")
        return _message(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        logger.warning(f"Rejected request to {request.url.path}: {exc.errors()}")
        return _message(400, "Invalid request")

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return _message(exc.status_code, str(exc.detail))


def create_app(config: Optional[Config] = None) -> FastAPI:
    """
    Build the API application.

    Args:
        config: Application configuration; read from the environment when omitted

    Returns:
        Configured FastAPI application with its record store on ``app.state.store``
    """
    config = config or Config.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        app.state.store.close()

    app = FastAPI(
        title="TenMinuteTransformation API",
        description="REST API for the TenMinuteTransformation journal",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan
    )
    app.state.config = config
    app.state.store = create_store(config.storage)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(tasks_router, prefix=API_PREFIX)
    app.include_router(daily_router, prefix=API_PREFIX)
    app.include_router(reflections_router, prefix=API_PREFIX)
    app.include_router(reviews_router, prefix=API_PREFIX)
    app.include_router(insights_router, prefix=API_PREFIX)

    @app.get("/")
    async def root() -> Dict[str, Any]:
        """
        Root endpoint - API information.

        Returns:
            Dictionary containing API metadata and status
        """
        return {
            "name": "TenMinuteTransformation API",
            "version": __version__,
            "status": "operational",
            "storage": app.state.store.name,
            "docs": "/docs"
        }

    @app.get("/health", response_class=PlainTextResponse)
    async def health_check() -> str:
        """Liveness check for monitoring and load balancers."""
        return "OK"

    logger.info(f"API ready with {app.state.store.name} storage")
    return app


_config = Config.from_env()
configure_logging(_config.server.log_level)

# Create FastAPI application
app = create_app(_config)


if __name__ == "__main__":
    import uvicorn

    logger.info("Starting TenMinuteTransformation API server...")
    uvicorn.run(
        "transformation.main:app",
        host=_config.server.host,
        port=_config.server.port,
        reload=_config.server.debug
    )
