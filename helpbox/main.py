"""
Helpbox - Main Application
==========================

Help-desk ticketing API with automated AI triage.

Modules:
- Users: accounts, access levels and cookie sessions
- Tickets: opening, listing and working tickets
- Triage: first-pass priority and suggested solution from an LLM

Clean Architecture Layers:
- Interfaces: FastAPI controllers
- Application: Services and DTOs
- Domain: Entities and business rules
- Infrastructure: Database, LLM clients
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Configuration and Core
from helpbox.config import settings
from helpbox.core import ApplicationException, ConfigurationException

# Infrastructure
from helpbox.infrastructure.database import init_database, close_database, create_tables
from helpbox.infrastructure.llm import UnavailableLLMClient

# Module Routers
from helpbox.users.interfaces import auth_router, users_router
from helpbox.tickets.interfaces import tickets_router
from helpbox.triage.infrastructure import build_triage_service

# Shared
from helpbox.shared.api.middleware import (
    CorrelationIDMiddleware,
    MetricsMiddleware,
    LoggingMiddleware,
    application_exception_handler,
    global_exception_handler,
)
from helpbox.shared.infrastructure.logging import setup_logging, get_logger, log_latency

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application lifespan manager.

    STARTUP:
    1. Setup structured logging
    2. Initialize database and create tables
    3. Build the triage service

    SHUTDOWN:
    1. Close database connections
    """
    # === STARTUP ===
    setup_logging(settings.log_level, settings.environment)
    logger.info("Starting Helpbox", extra={
        "version": settings.app_version,
        "environment": settings.environment
    })

    logger.info("Initializing database")
    init_database()

    # Note: if the database is not reachable the server still starts, but
    # database-backed endpoints will fail
    try:
        with log_latency(logger, "create_tables"):
            await create_tables()
        app.state.database_ready = True
    except Exception as e:
        logger.warning(f"Database not available - running in degraded mode: {e}")
        app.state.database_ready = False

    logger.info("Initializing triage service", extra={"provider": settings.llm_provider})
    try:
        app.state.triage_service = build_triage_service()
        app.state.llm_client = "mock" if settings.mock_llm else "available"
    except ConfigurationException as e:
        # Tickets can still be opened; every triage gets the fixed fallback answer
        logger.warning(f"LLM client not configured, triage will use the fallback answer: {e.message}")
        app.state.triage_service = build_triage_service(client=UnavailableLLMClient(e.message))
        app.state.llm_client = "unavailable"

    logger.info("Helpbox started successfully")

    yield  # Application runs here

    # === SHUTDOWN ===
    logger.info("Shutting down Helpbox")
    await close_database()
    logger.info("Helpbox shutdown complete")


# Create FastAPI application
app = FastAPI(
    title="Helpbox API",
    description="""
    ## Help-desk ticketing with automated triage

    ### Auth
    - `POST /auth/login` - Open a session (HTTP-only cookie)
    - `GET /auth/me` - Current user
    - `POST /auth/logout` - Close the session

    ### Tickets
    - `POST /tickets` - Open a ticket; the AI assistant proposes priority and first steps
    - `GET /tickets/mine` - Tickets I opened or work on
    - `GET /tickets/queue` - Unassigned in-progress tickets (technicians)
    - `GET /tickets` - Every ticket (administrators)
    - `PUT /tickets/{id}/escalate|close|reopen|agree` - Workflow actions

    ### Users (administrators)
    - `GET|POST /users`, `PUT|DELETE /users/{id}`

    **Priorities:** `A` high, `M` medium, `B` low.
    **Statuses:** `Aberto`, `Em andamento`, `Fechado`.
    """,
    version=settings.app_version,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# === Custom Middleware (from shared) ===
# Last added runs first: correlation ID wraps logging
app.add_middleware(LoggingMiddleware)
app.add_middleware(MetricsMiddleware)
app.add_middleware(CorrelationIDMiddleware)

# === CORS Middleware ===
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(ApplicationException, application_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)

# === Include Module Routers ===
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(tickets_router)


# === Health Check Endpoint ===

@app.get("/health", tags=["Health"], responses={
    200: {
        "description": "Service is healthy",
        "content": {
            "application/json": {
                "example": {
                    "status": "healthy",
                    "version": "1.0.0",
                    "environment": "development",
                    "checks": {
                        "database": "connected",
                        "llm_client": "available"
                    }
                }
            }
        }
    }
})
async def health_check():
    """
    Health check endpoint for load balancers and orchestrators.

    Reports database and LLM client status as seen at startup.
    """
    database_ready = getattr(app.state, "database_ready", None)
    llm_client = getattr(app.state, "llm_client", "unknown")

    checks = {
        "database": {True: "connected", False: "unavailable"}.get(database_ready, "unknown"),
        "llm_client": llm_client,
    }

    return {
        "status": "healthy" if database_ready is not False else "degraded",
        "version": settings.app_version,
        "environment": settings.environment,
        "checks": checks
    }


@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with API information."""
    return {
        "service": "Helpbox",
        "version": settings.app_version,
        "architecture": "Clean Architecture / Modular Monolith",
        "docs": "/docs",
        "health": "/health",
        "modules": {
            "auth": {"prefix": "/auth"},
            "users": {"prefix": "/users"},
            "tickets": {"prefix": "/tickets"}
        }
    }


# === Development Entry Point ===

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "helpbox.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.environment == "development",
        log_level=settings.log_level.lower()
    )
