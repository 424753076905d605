"""
DeskFlow API - Main Application
===============================

FastAPI application entry point with middleware configuration
and route registration.
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import newrelic.agent

# Configure logging for the application (root logger defaults to WARNING)
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from deskflow.config import settings
from deskflow.core.errors import setup_exception_handlers
from deskflow.core.route_gate import SessionGateMiddleware
from deskflow.db.session import close_db, init_db
from deskflow.services.cache import close_redis, init_redis

logger = logging.getLogger("deskflow")

API_VERSION = "1.0.0"


# =============================================================================
# New Relic Transaction Enrichment Middleware (Raw ASGI)
# =============================================================================

class NewRelicTransactionMiddleware:
    """
    Raw ASGI middleware that adds custom attributes to every New Relic
    transaction.

    Raw ASGI keeps the route handler in the same task, so database and
    Redis spans stay attached to the transaction.

    Captures: response status, latency, HTTP method, route pattern, and
    account ID (when authenticated).
    """

    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        start = time.perf_counter()
        status_code = 500

        async def send_wrapper(message):
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            duration_ms = (time.perf_counter() - start) * 1000

            txn = newrelic.agent.current_transaction()
            if txn:
                # Route pattern (e.g. "/api/v1/projects/{project_id}") for grouping
                route = scope.get("route")
                route_path = route.path if route else scope.get("path", "unknown")

                client = scope.get("client")
                client_ip = client[0] if client else "unknown"

                newrelic.agent.add_custom_attributes([
                    ("http.method", scope.get("method", "")),
                    ("http.route", route_path),
                    ("http.status_code", status_code),
                    ("http.duration_ms", round(duration_ms, 2)),
                    ("http.client_ip", client_ip),
                    ("environment", settings.ENVIRONMENT),
                ])

                # Set by the session dependency
                state = scope.get("state")
                account_id = state.get("account_id") if isinstance(state, dict) else None
                if account_id:
                    newrelic.agent.add_custom_attribute("enduser.id", str(account_id))


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Opens the database and Redis connections on startup and closes them
    on shutdown.
    """
    logger.info("Starting DeskFlow API (%s)", settings.ENVIRONMENT)

    if settings.uses_default_secret:
        if settings.is_production:
            logger.error("JWT_SECRET is the built-in default; set a real secret in production")
        else:
            logger.warning("Using the built-in JWT_SECRET; sessions are not secure")

    # Continue startup even if DB fails (health checks still answer)
    try:
        await init_db()
    except Exception as e:
        logger.error("Database connection failed: %s", e)

    try:
        await init_redis()
    except Exception as e:
        logger.warning("Redis connection failed: %s", e)

    yield

    logger.info("Shutting down DeskFlow API")
    await close_db()
    await close_redis()


app = FastAPI(
    title="DeskFlow API",
    description="""
## DeskFlow Freelancer Workspace Backend

Clients, projects, tasks and finances for independent professionals.

### Features
- **Authentication**: Email/password with an HTTP-only session cookie
- **Projects**: Importance-weighted progress and timing status
- **Finances**: Expenses, incomes, monthly summaries and project net profit
- **Dashboard**: Counters, upcoming tasks and portfolio finances
    """,
    version=API_VERSION,
    docs_url="/docs" if settings.is_development else None,
    redoc_url="/redoc" if settings.is_development else None,
    openapi_url="/openapi.json" if settings.is_development else None,
    lifespan=lifespan,
    responses={
        400: {"description": "Validation error"},
        401: {"description": "Not authenticated"},
        404: {"description": "Resource not found"},
        409: {"description": "Resource conflict"},
        429: {"description": "Too many attempts"},
        500: {"description": "Internal server error"},
        503: {"description": "Database unavailable"},
    },
)

# Page redirects for signed-in / signed-out visitors
app.add_middleware(SessionGateMiddleware)

# New Relic transaction enrichment (adds custom attrs to every transaction)
app.add_middleware(NewRelicTransactionMiddleware)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

setup_exception_handlers(app)


# =============================================================================
# Health Check Endpoints
# =============================================================================

@app.get("/health", tags=["Health"])
async def health_check() -> dict:
    """
    Health check endpoint.

    Returns the current status of the API.
    """
    return {
        "status": "healthy",
        "version": API_VERSION,
        "environment": settings.ENVIRONMENT,
    }


@app.get("/api", tags=["Health"])
async def api_info() -> dict:
    """API information."""
    return {
        "name": "DeskFlow API",
        "version": API_VERSION,
        "docs": "/docs" if settings.is_development else "Disabled in production",
    }


# =============================================================================
# Routes
# =============================================================================

from deskflow.api import pages
app.include_router(pages.router, tags=["Pages"])

from deskflow.api.v1 import auth
app.include_router(auth.router, prefix="/api/v1/auth", tags=["Authentication"])

from deskflow.api.v1 import clients
app.include_router(clients.router, prefix="/api/v1/clients", tags=["Clients"])

from deskflow.api.v1 import projects, tasks
app.include_router(projects.router, prefix="/api/v1/projects", tags=["Projects"])
app.include_router(tasks.router, prefix="/api/v1/tasks", tags=["Tasks"])

from deskflow.api.v1 import finances
app.include_router(finances.router, prefix="/api/v1/finances", tags=["Finances"])

from deskflow.api.v1 import settings as settings_api
app.include_router(settings_api.router, prefix="/api/v1/settings", tags=["Settings"])

from deskflow.api.v1 import dashboard
app.include_router(dashboard.router, prefix="/api/v1/dashboard", tags=["Dashboard"])
