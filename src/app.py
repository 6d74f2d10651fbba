"""Main FastAPI application module.

This module initializes the FastAPI application and registers all route handlers.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.logging_config import setup_logging
from config import (
    CORS_ALLOWED_ORIGINS,
    API_HOST,
    API_PORT,
)
from core.database import SessionLocal
from core.route_guard import RouteGuardMiddleware
from api.routes import admin, auth, embeds, moderation, profile, roles, users, whitelist
from utils.permission_manager import PermissionManager

# Setup logging
setup_logging()

# Initialize FastAPI application
app = FastAPI(
    title="Embed Manager API",
    description="Save, preview and manage third-party embed codes.",
    version="1.0.0",
)

# The route guard runs inside CORS so preflight requests never reach it
app.add_middleware(RouteGuardMiddleware)

# Configure CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register route handlers
app.include_router(auth.router)
app.include_router(embeds.router)
app.include_router(whitelist.router)
app.include_router(users.router)
app.include_router(roles.router)
app.include_router(profile.router)
app.include_router(moderation.router)
app.include_router(admin.router)


@app.on_event("startup")
def startup_tasks() -> None:
    """Insert the default role permissions that are missing."""
    db = SessionLocal()
    try:
        PermissionManager(db).seed_default_permissions()
    finally:
        db.close()


@app.get("/", summary="API root", tags=["Info"])
def root() -> dict:
    """API root, returning API information and documentation links.

    Returns:
        Dictionary with API information and documentation links.
    """
    return {
        "name": "Embed Manager API",
        "version": "1.0.0",
        "description": "Save, preview and manage third-party embed codes.",
        "docs": {
            "swagger": "/docs",
            "redoc": "/redoc",
        },
        "health": "/api/health",
    }


@app.get("/api/health", summary="Health check", tags=["Health"])
def health() -> dict:
    """Health check endpoint.

    Returns:
        Dictionary with status "ok".
    """
    return {"status": "ok"}


# --- Startup code for direct execution ---
if __name__ == "__main__":
    import uvicorn

    server_url = f"http://{API_HOST}:{API_PORT}"
    print(f"Starting Embed Manager API at {server_url}")
    print(f"API docs: {server_url}/docs")

    uvicorn.run("app:app", host=API_HOST, port=API_PORT, reload=True)
