"""
Customer Tracker - Main FastAPI Application.

Wires the Supabase client, auth service and customer repository together
and exposes them over HTTP.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .auth_service import SupabaseAuthService
from .config import settings
from .logging_config import get_logger, setup_logging
from .repositories.customer_repository import CustomerRepository
from .repositories.supabase_data_service import SupabaseDataService
from .routers import auth_router, customers_router
from .supabase_client import config as supabase_config
from .supabase_client import get_supabase_client, reset_supabase_client

# Setup logging
setup_logging(log_level=settings.LOG_LEVEL, service_name="customer-tracker")
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan context manager.

    Builds the shared services and performs the initial customer load.
    """
    logger.info("Starting Customer Tracker...")
    logger.info(f"Debug mode: {settings.DEBUG}")
    logger.info(f"Log level: {settings.LOG_LEVEL}")

    client = await get_supabase_client()
    data_service = SupabaseDataService(supabase_config.rest_url, supabase_config.key)
    app.state.auth_service = SupabaseAuthService(
        client, data_service, profiles_table=settings.USER_PROFILES_TABLE
    )
    app.state.customer_repository = CustomerRepository(
        data_service, table=settings.CUSTOMERS_TABLE
    )

    # No caller yet: this load runs with the anon key
    result = await app.state.customer_repository.load()
    if not result.ok:
        logger.warning("Initial customer load failed; use POST /customers/refresh to retry")

    yield

    logger.info("Shutting down Customer Tracker...")
    reset_supabase_client()


app = FastAPI(
    title=settings.APP_NAME,
    description="Customer tracking backed by Supabase",
    version=__version__,
    docs_url="/api/docs" if settings.DEBUG else None,
    redoc_url="/api/redoc" if settings.DEBUG else None,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router)
app.include_router(customers_router)


@app.get("/", tags=["Health"])
async def root():
    """Service information."""
    return {
        "service": settings.APP_NAME,
        "version": __version__,
        "status": "active",
    }


@app.get("/health", tags=["Health"])
async def health():
    """Health check; reports whether the initial load has settled."""
    repository = getattr(app.state, "customer_repository", None)
    return {
        "status": "healthy",
        "service": "customer-tracker",
        "customers_loaded": repository is not None and not repository.is_loading,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "customer_tracker.app:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
