# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the Showroom Admin API.
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
from app.exceptions import AdminConsoleException, admin_console_exception_handler
from app.routers import (
    admins,
    dashboard,
    gallery,
    health,
    products,
    profiles,
    quotes,
    stories,
    team,
)
from app.auth import routes as auth_routes

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

    Logs the effective configuration on startup. The Supabase client is
    created lazily on first use.
    """
    logger.info(f"Starting Showroom Admin API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")
    logger.info(f"Media bucket: {settings.STORAGE_BUCKET}")

    yield

    logger.info("Shutting down Showroom Admin API")


# Create FastAPI application
app = FastAPI(
    title="Showroom Admin API",
    description="""
## Back-office API for the furniture showroom

Staff sign in and manage everything the storefront shows.

### Screens

| Screen | What it manages |
|--------|-----------------|
| **Products** | Listings with price, category and images |
| **Gallery** | Showcase projects with images and videos |
| **Stories** | Short-lived posts with one image or video |
| **Team** | Staff profiles with a portrait |
| **Quotes** | Quote requests from customers |
| **Profiles** | Customer profiles |
| **Admins** | Console access (superadmin only to change) |

### Media

Files are uploaded to a single Supabase Storage bucket, one folder per
screen. A record is only written after all of its files are stored, and
deleting a record removes its files first.

### Quick Start

```bash
# 1. Sign in
curl -X POST http://localhost:8000/api/v1/auth/login \\
  -H "Content-Type: application/json" \\
  -d '{"email": "owner@shop.com", "password": "..."}'

# 2. Create a gallery project
curl -X POST http://localhost:8000/api/v1/gallery \\
  -H "Authorization: Bearer $TOKEN" \\
  -F "title=Sofa Set" -F "description=Living room delivery" \\
  -F "files=@sofa.png"
```
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "Auth", "description": "Sign-in, sign-out and the current admin"},
        {"name": "Dashboard", "description": "Navigation entries"},
        {"name": "Products", "description": "Product listings and images"},
        {"name": "Gallery", "description": "Gallery projects"},
        {"name": "Stories", "description": "Stories"},
        {"name": "Team", "description": "Team member profiles"},
        {"name": "Quotes", "description": "Customer quote requests"},
        {"name": "Profiles", "description": "Customer profiles"},
        {"name": "Admins", "description": "Admin roster"},
        {"name": "Health", "description": "API health and readiness checks"},
    ],
)


# =============================================================================
# Middleware
# =============================================================================

# CORS middleware - allows the console frontend to call the API
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

@app.exception_handler(AdminConsoleException)
async def handle_admin_console_exception(request: Request, exc: AdminConsoleException):
    """Handle custom admin console exceptions."""
    return await admin_console_exception_handler(request, exc)


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

API_PREFIX = "/api/v1"

app.include_router(auth_routes.router, prefix=f"{API_PREFIX}/auth", tags=["Auth"])
app.include_router(health.router, prefix=API_PREFIX, tags=["Health"])
app.include_router(dashboard.router, prefix=f"{API_PREFIX}/dashboard", tags=["Dashboard"])
app.include_router(products.router, prefix=f"{API_PREFIX}/products", tags=["Products"])
app.include_router(gallery.router, prefix=f"{API_PREFIX}/gallery", tags=["Gallery"])
app.include_router(stories.router, prefix=f"{API_PREFIX}/stories", tags=["Stories"])
app.include_router(team.router, prefix=f"{API_PREFIX}/team", tags=["Team"])
app.include_router(quotes.router, prefix=f"{API_PREFIX}/quotes", tags=["Quotes"])
app.include_router(profiles.router, prefix=f"{API_PREFIX}/profiles", tags=["Profiles"])
app.include_router(admins.router, prefix=f"{API_PREFIX}/admins", tags=["Admins"])


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "Showroom Admin API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/v1/health",
    }
