"""
Eco Admin - FastAPI Application

Main entry point for the Eco Admin dashboard backend.

Views:
- Map: trash reports as status-colored markers, detail panel, status workflow
- Logs: most recent system log entries, level filter and search
- Users: project users with search, active toggle, edit and create
- Admin users: operator accounts (admin role writes)
"""
from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .config import CORS_ORIGINS, LOG_LEVEL
from .database import init_db
from .routers import (
    dashboard_router, users_router, map_router, logs_router, admin_users_router,
)

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize database on startup."""
    init_db()
    logger.info("Eco Admin %s started", __version__)
    yield

# Create FastAPI app
app = FastAPI(
    lifespan=lifespan,
    title="Eco Admin",
    description="""
    Eco Admin - Environmental Reporting Control Panel

    Every screen follows the same loop: fetch rows, filter in memory,
    render, apply a point update on operator action, re-fetch.

    ## Views
    1. **Map**: reports as markers colored by status; click opens the detail panel
    2. **Logs**: append-only audit log, 100 most recent entries
    3. **Users**: project users; toggle active, edit, create

    ## Status workflow
    reported, in_progress, cleaned, rejected. Any status may move to any
    other; entering "cleaned" stamps cleaned_at.
    """,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(dashboard_router)
app.include_router(map_router)
app.include_router(logs_router)
app.include_router(users_router)
app.include_router(admin_users_router)


@app.get("/")
async def root():
    """Root endpoint - API information."""
    return {
        "name": "Eco Admin",
        "version": __version__,
        "docs": "/docs",
        "views": ["map", "logs", "users"],
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}


# For running with: python -m eco_admin.main
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8001)
