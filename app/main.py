# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the Smart Import API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.exceptions import (
    SmartImportException,
    application_error_handler,
    smart_import_exception_handler,
)
from app.routers import health, imports
from lib.supabase_client import SupabaseClient
from lib.utils import ApplicationError

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Logs the effective configuration on startup.
    """
    logger.info(f"Starting Smart Import API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")
    if not SupabaseClient.is_configured():
        logger.warning("Supabase not configured: confirmed imports will be rejected")

    yield

    logger.info("Shutting down Smart Import API")


# Create FastAPI application
app = FastAPI(
    title="Smart Import API",
    description="""
## Automatic Schema Detection for Dashboard Imports

Upload rows of unknown shape (already parsed from CSV or JSON) and get back
a preview that maps each column onto the dashboard's canonical schema.

### How It Works

1. **Preview** - Column types are detected from names and sample values,
   mapped to canonical fields and every row is converted and validated
2. **Review** - Check mappings, confidence and per-cell errors
3. **Confirm** - Store the valid rows

Columns named in English or Italian are recognised
(e.g. `fatturato`, `negozio`, `canale`, `data`).
""",
    version=health.API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "Imports",
            "description": "Preview, validate, export and confirm imports",
        },
        {
            "name": "Health",
            "description": "API health and liveness checks",
        },
    ],
)


# =============================================================================
# Middleware
# =============================================================================

# CORS middleware - allows cross-origin requests
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(SmartImportException)
async def handle_smart_import_exception(request: Request, exc: SmartImportException):
    """Handle request-level API exceptions."""
    return await smart_import_exception_handler(request, exc)


@app.exception_handler(ApplicationError)
async def handle_application_error(request: Request, exc: ApplicationError):
    """Handle pipeline capability errors (unsupported export format)."""
    return await application_error_handler(request, exc)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

# Health check endpoints
app.include_router(
    health.router,
    prefix="/api/v1",
    tags=["Health"]
)

# Import wizard endpoints
app.include_router(
    imports.router,
    prefix="/api/v1/imports",
    tags=["Imports"]
)


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "Smart Import API",
        "version": health.API_VERSION,
        "docs": "/docs",
        "health": "/api/v1/health",
    }
