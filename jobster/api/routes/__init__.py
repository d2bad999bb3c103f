"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from jobster.api.routes.auth_routes import router as auth_router
from jobster.api.routes.job_routes import router as job_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(auth_router)
api_router.include_router(job_router)
