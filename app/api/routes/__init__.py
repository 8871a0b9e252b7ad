"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from app.api.routes.student_routes import router as student_router
from app.api.routes.job_routes import router as job_router
from app.api.routes.requirement_routes import router as requirement_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(student_router)
api_router.include_router(job_router)
api_router.include_router(requirement_router)
