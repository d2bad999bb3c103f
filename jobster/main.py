"""
Jobster API - Main Application

FastAPI backend with:
- MongoDB for users and job applications
- JWT authentication (bearer tokens)
- Rate-limited register/login
- Built frontend served from FRONTEND_DIR when present

Run: uvicorn jobster.main:app --reload
"""

import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from fastapi.responses import FileResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from jobster import __version__
from jobster.api import api_router
from jobster.core.config import Settings, get_settings
from jobster.core.errors import register_exception_handlers
from jobster.core.logging_config import configure_logging
from jobster.core.rate_limit import SlidingWindowRateLimiter
from jobster.db.mongodb import MongoDatabase

logger = logging.getLogger(__name__)

# Get the project root directory
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the MongoDB client on startup and close it on shutdown."""
    database: MongoDatabase = app.state.database
    database.connect()
    try:
        database.init_indexes()
    except Exception as e:
        # The API still serves; queries fail individually until Mongo is reachable
        logger.warning("MongoDB index initialization failed: %s", e)
    yield
    database.close()


def create_app(settings: Optional[Settings] = None, database: Optional[MongoDatabase] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Tests pass their own settings/database; production uses the defaults.
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Jobster API",
        description="""
        Track job applications.

        ## Features
        - **Authentication**: register, login, profile and password updates (JWT)
        - **Jobs**: create, list, search, filter, sort, paginate, update, delete
        - **Stats**: counts per status and monthly applications
        """,
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan
    )

    app.state.settings = settings
    app.state.database = database or MongoDatabase.from_settings(settings)
    app.state.auth_limiter = SlidingWindowRateLimiter(
        max_requests=settings.auth_rate_limit_max,
        window_seconds=settings.auth_rate_limit_window_seconds
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Include API routes
    app.include_router(api_router, prefix="/api/v1")

    @app.get("/health", tags=["Health"])
    def health_check():
        """Liveness plus MongoDB reachability."""
        db = app.state.database
        return {
            "status": "healthy",
            "mongodb": "connected" if db.is_connected and db.ping() else "disconnected"
        }

    frontend_dir = settings.frontend_dir
    if not os.path.isabs(frontend_dir):
        frontend_dir = os.path.join(PROJECT_ROOT, frontend_dir)
    frontend_dir = os.path.realpath(frontend_dir)
    index_path = os.path.join(frontend_dir, "index.html")

    # Serve static files of the built frontend
    static_dir = os.path.join(frontend_dir, "static")
    if os.path.isdir(static_dir):
        app.mount("/static", StaticFiles(directory=static_dir), name="static")

    @app.get("/", tags=["Frontend"])
    def serve_frontend():
        """Serve the frontend build."""
        if os.path.exists(index_path):
            return FileResponse(index_path)
        return {"status": "healthy", "app": "Jobster API", "message": "Frontend not found. API is running."}

    # Registered last so every API route matches first
    @app.api_route("/{full_path:path}", methods=["GET", "POST", "PUT", "PATCH", "DELETE"], include_in_schema=False)
    def serve_frontend_path(request: Request, full_path: str):
        """
        Files at the root of the build (favicon, manifest, ...) are served as is.
        Any other GET outside /api gets index.html so client-side routes load.
        """
        if request.method != "GET" or full_path == "api" or full_path.startswith("api/"):
            raise StarletteHTTPException(status_code=404)

        candidate = os.path.realpath(os.path.join(frontend_dir, full_path))
        if os.path.commonpath([frontend_dir, candidate]) == frontend_dir and os.path.isfile(candidate):
            return FileResponse(candidate)
        if os.path.exists(index_path):
            return FileResponse(index_path)
        raise StarletteHTTPException(status_code=404)

    return app


app = create_app()
