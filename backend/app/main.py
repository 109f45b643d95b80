"""
NonprofitSuite FastAPI Application - Main entry point.

NonprofitSuite is the backend for nonprofit governance work. It includes:

- Governance: Meetings, agenda items, minutes with approval
- Tasks: Action items promoted to tracked tasks
- Documents: Share links gated by password, email and terms acceptance
- Feedback: Beta feedback from the admin UI

The admin UI talks to the AJAX dispatcher at /api/ajax/{action}.
REST endpoints are available under /api/v1/{module}/ paths.
Public share pages live under /documents/share/{token}.
"""
import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from app.core.config import settings
from app.core.exceptions import AppError
from app.core.logging import configure_logging
from app.db.base import init_db

from app.api import public
from app.api.ajax import AjaxFailure, router as ajax_router
from app.api.v1 import badges, health, tasks
from app.api.v1.documents import documents_router
from app.api.v1.governance import governance_router

logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).resolve().parent / "static"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown."""
    configure_logging()
    # Note: In production, use Alembic migrations instead
    await init_db()
    logger.info("%s started", settings.APP_NAME)
    yield


app = FastAPI(
    title=settings.APP_NAME,
    version="1.0.0",
    description="""
NonprofitSuite - Meetings, tasks and document sharing for nonprofits.

## Modules

- **Governance**: Meetings, agenda items, minutes
- **Tasks**: Tasks promoted from meeting action items
- **Documents**: Documents, gated share links, access statistics

## Surfaces

- Admin UI AJAX actions: `/api/ajax/{action}`
- REST API v1: `/api/v1/*`
- Public share pages: `/documents/share/{token}`
    """,
    lifespan=lifespan,
    docs_url="/api/docs" if settings.DEBUG else None,
    redoc_url="/api/redoc" if settings.DEBUG else None,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================
# ROUTERS
# ============================================================================

# Health - /api/health
app.include_router(health.router, prefix="/api", tags=["health"])

# Governance module - /api/v1/governance/*
# Includes: meetings, agenda-items, minutes
app.include_router(governance_router, prefix="/api/v1")

# Tasks module - /api/v1/tasks/*
app.include_router(tasks.router, prefix="/api/v1")

# Status badge tables for the admin UI - /api/v1/badges
app.include_router(badges.router, prefix="/api/v1")

# Documents module - /api/v1/documents/*
app.include_router(documents_router, prefix="/api/v1")

# Admin UI actions - /api/ajax/{action}
app.include_router(ajax_router)

# Public share pages - /documents/share/*
app.include_router(public.router)

# Admin UI assets and generated exports
app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")
app.mount(settings.EXPORT_URL, StaticFiles(directory=settings.EXPORT_DIR, check_dir=False), name="exports")


# ============================================================================
# ERROR HANDLERS
# ============================================================================

@app.exception_handler(AjaxFailure)
async def ajax_failure_handler(request: Request, exc: AjaxFailure):
    """AJAX envelope for failed admin actions."""
    return exc.to_response()


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    """Expected domain errors raised by services."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message}
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    if settings.DEBUG:
        return JSONResponse(
            status_code=500,
            content={"detail": str(exc)}
        )
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"}
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG
    )
