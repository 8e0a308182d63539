"""
Main Application Entry Point.

This module initializes the FastAPI application, configures middleware (CORS,
request tracing), registers the exception handlers, mounts the uploaded files
and includes all API routers.
"""

from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from streamo.core.database import init_db
from streamo.core.logging_config import get_logger, setup_logging
from streamo.core.monitoring import initialize_logfire

from .api.v1 import (
    admin,
    analytics,
    auth,
    csv,
    earnings,
    health,
    invitations,
    notifications,
    releases,
    rights_requests,
    royalties,
    stores,
    tracks,
    transactions,
    users,
    withdrawals,
)
from .api.v1 import settings as site_settings
from .core import constant
from .core.config import settings
from .exception_handlers import setup_exception_handlers
from .middleware import LogfireMiddleware

# Initialize logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events.

    Creates the tables on startup when ``DATABASE__CREATE_ALL`` is set.
    """
    try:
        logger.info("Starting up Streamo Server...")
        await init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}", exc_info=True)

    yield

    logger.info("Shutting down Streamo Server...")


app = FastAPI(
    title=constant.PROJECT_NAME,
    description="""
    Streamo Server API

    Back-office API of a music distribution service. Artists and labels manage
    releases, tracks and videos; staff review the catalogue, import distributor
    royalty reports, reconcile them by ISRC and process payouts.
    """,
    version=constant.API_VERSION,
    openapi_url=f"{constant.API_V1_STR}/openapi.json",
    docs_url=f"{constant.API_V1_STR}/docs",
    redoc_url=f"{constant.API_V1_STR}/redoc",
    lifespan=lifespan,
)

app.add_middleware(LogfireMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors.origins,
    allow_credentials=settings.cors.allow_credentials,
    allow_methods=settings.cors.allow_methods,
    allow_headers=settings.cors.allow_headers,
)

setup_exception_handlers(app)

Path(settings.uploads.root).mkdir(parents=True, exist_ok=True)
app.mount(
    constant.UPLOADS_URL_PREFIX,
    StaticFiles(directory=settings.uploads.root, check_dir=False),
    name="uploads",
)

app.include_router(health.router, tags=["health"])
app.include_router(auth.router, prefix=f"{constant.API_V1_STR}/auth", tags=["auth"])
app.include_router(users.router, prefix=f"{constant.API_V1_STR}/users", tags=["users"])
app.include_router(releases.router, prefix=f"{constant.API_V1_STR}/releases", tags=["releases"])
app.include_router(tracks.router, prefix=f"{constant.API_V1_STR}/tracks", tags=["tracks"])
app.include_router(stores.router, prefix=f"{constant.API_V1_STR}/stores", tags=["stores"])
app.include_router(csv.router, prefix=f"{constant.API_V1_STR}/csv", tags=["csv"])
app.include_router(transactions.router, prefix=f"{constant.API_V1_STR}/transactions", tags=["transactions"])
app.include_router(admin.router, prefix=f"{constant.API_V1_STR}/admin", tags=["admin"])
app.include_router(earnings.router, prefix=f"{constant.API_V1_STR}/earnings", tags=["earnings"])
app.include_router(royalties.router, prefix=f"{constant.API_V1_STR}/royalties", tags=["royalties"])
app.include_router(withdrawals.router, prefix=f"{constant.API_V1_STR}/withdrawals", tags=["withdrawals"])
app.include_router(analytics.router, prefix=f"{constant.API_V1_STR}/analytics", tags=["analytics"])
app.include_router(notifications.router, prefix=f"{constant.API_V1_STR}/notifications", tags=["notifications"])
app.include_router(invitations.router, prefix=f"{constant.API_V1_STR}/invitations", tags=["invitations"])
app.include_router(site_settings.router, prefix=f"{constant.API_V1_STR}/settings", tags=["settings"])
app.include_router(
    rights_requests.router, prefix=f"{constant.API_V1_STR}/rights-requests", tags=["rights-requests"]
)

initialize_logfire(app)
