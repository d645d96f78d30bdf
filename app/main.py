"""
Internship Placement & Monitoring Platform - Main Application

FastAPI backend with:
- PostgreSQL for structured data (SQLAlchemy)
- JWT authentication with one role per account
  (student, coordinator, supervisor, admin)
- Weighted evaluation scoring and roster reconciliation

Run: uvicorn app.main:app --reload
"""

import logging
import sys

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.routes import api_router
from app.core.config import get_settings
from app.db.postgres import test_postgres_connection
from app.db.tables import init_db

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Internship Placement Platform",
    description="""
    Placement and monitoring of student internships.

    ## Features
    - **Authentication**: JWT-based auth for students, coordinators, supervisors and admins
    - **Internships**: Coordinators create internship programs and manage their student rosters
    - **Evaluations**: Supervisors rate interns per weighted category
    - **Attendance**: Supervisors mark daily attendance, students see their summary
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS middleware (allow all for development)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_router, prefix="/api")


# Startup event
@app.on_event("startup")
async def startup_event():
    """Create missing tables on startup."""
    try:
        init_db()
    except Exception as e:
        logger.error("Database schema initialization failed: %s", e)


@app.get("/", tags=["Health"])
async def root():
    return {"status": "healthy", "app": "Internship Placement Platform"}


@app.get("/health", tags=["Health"])
async def health_check():
    """Detailed health check."""
    database_ok = test_postgres_connection()
    return {
        "status": "healthy" if database_ok else "degraded",
        "database": "connected" if database_ok else "disconnected"
    }
