"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from app.api.routes.auth_routes import router as auth_router
from app.api.routes.internship_routes import router as internship_router
from app.api.routes.evaluation_routes import router as evaluation_router
from app.api.routes.student_routes import router as student_router
from app.api.routes.supervisor_routes import router as supervisor_router
from app.api.routes.coordinator_routes import router as coordinator_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(auth_router)
api_router.include_router(internship_router)
api_router.include_router(evaluation_router)
api_router.include_router(student_router)
api_router.include_router(supervisor_router)
api_router.include_router(coordinator_router)
