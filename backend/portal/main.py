"""
E-Government Portal Core - FastAPI entry point

``create_app`` wires logging, middleware, error handlers and the /api/v1
routers; ``app`` is the instance uvicorn serves.
"""
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config.settings import settings
from .api.routes import api_router
from .api.middleware import CorrelationIdMiddleware, register_error_handlers
from .repositories.mongo_client import create_indexes, close_connection, health_check
from .repositories.data_store import set_data_store
from .utils.logger import setup_logging, get_logger

setup_logging()
logger = get_logger(__name__)

APP_NAME = "E-Government Portal Core"
VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Ensure indexes on startup; drop the connection and shared store on shutdown"""
    logger.info(f"Starting {APP_NAME} {VERSION} ({settings.environment})")
    try:
        create_indexes()
    except Exception as e:
        # The API still starts; requests fail individually until MongoDB is back
        logger.error(f"Index creation failed: {e}")

    yield

    close_connection()
    set_data_store(None)
    logger.info(f"{APP_NAME} stopped")


def create_app() -> FastAPI:
    docs_enabled = settings.debug
    application = FastAPI(
        title=APP_NAME,
        description="Application and document lifecycle: eligibility, verification, approval, printing",
        version=VERSION,
        lifespan=lifespan,
        docs_url="/api/docs" if docs_enabled else None,
        redoc_url="/api/redoc" if docs_enabled else None,
        openapi_url="/api/openapi.json" if docs_enabled else None,
    )

    # Wildcard origins cannot be combined with credentials
    wildcard = settings.cors_origins.strip() == "*"
    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if wildcard else settings.cors_origins_list,
        allow_credentials=not wildcard,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Correlation-Id"],
    )
    application.add_middleware(CorrelationIdMiddleware)

    register_error_handlers(application)
    application.include_router(api_router, prefix="/api/v1")
    application.add_api_route("/health", health, methods=["GET"], tags=["Health"])

    return application


def health():
    """Liveness plus MongoDB reachability"""
    mongo = health_check()
    return {
        "status": "healthy" if mongo["status"] == "healthy" else "degraded",
        "version": VERSION,
        "environment": settings.environment,
        "mongo": mongo,
    }


app = create_app()
