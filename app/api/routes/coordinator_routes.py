"""
Coordinator Routes (coordinators and admins)

GET /coordinators/dashboard - Headline counts for the current semester
GET /coordinators/analytics - Growth, success rates and per-company breakdowns
GET /coordinators/students - All students with their current placement
GET /coordinators/students/{student_id} - One student, active internship, recent evaluations
"""

import logging
from typing import List

from fastapi import APIRouter, HTTPException, Depends

from app.core.auth import get_current_coordinator
from app.core.config import get_settings
from app.db.postgres import get_db_session
from app.services import coordinator_service
from app.services.evaluation_service import get_evaluations_by_student
from app.services.internship_service import get_user, get_internships_by_student
from app.schemas.schemas import (
    DashboardResponse, AnalyticsResponse, StudentSummary, StudentDetail, StudentProfile,
    StudentInternship, StudentEvaluationSummary
)

logger = logging.getLogger(__name__)

settings = get_settings()

router = APIRouter(prefix="/coordinators", tags=["Coordinators"])


@router.get("/dashboard", response_model=DashboardResponse)
async def get_dashboard(coordinator: dict = Depends(get_current_coordinator)):
    return DashboardResponse(**coordinator_service.dashboard_summary())


@router.get("/analytics", response_model=AnalyticsResponse)
async def get_analytics(coordinator: dict = Depends(get_current_coordinator)):
    with get_db_session() as db:
        summary = coordinator_service.analytics_summary(db)
    return AnalyticsResponse(**summary)


@router.get("/students", response_model=List[StudentSummary])
async def list_students(coordinator: dict = Depends(get_current_coordinator)):
    with get_db_session() as db:
        students = coordinator_service.list_students(db)
    return [StudentSummary(**s) for s in students]


@router.get("/students/{student_id}", response_model=StudentDetail)
async def get_student(student_id: int, coordinator: dict = Depends(get_current_coordinator)):
    """
    Student profile with their active internship (if any) and the most
    recent evaluations. Drafts are included; coordinators see every status.
    """
    with get_db_session() as db:
        user = get_user(db, student_id)
        if not user or user["role"] != "student":
            raise HTTPException(status_code=404, detail="Student not found")

        rows = get_internships_by_student(db, student_id)
        active = next((r for r in rows if r["status"] == "active"), None)
        evaluations = get_evaluations_by_student(db, student_id)

    logger.debug("Student %s: %d internship row(s), %d evaluation(s)", student_id, len(rows), len(evaluations))

    return StudentDetail(
        student=StudentProfile(
            id=user["id"], name=user["name"], email=user["email"], phone=user["phone"] or "",
            created_at=user["created_at"], updated_at=user["updated_at"]
        ),
        internship=StudentInternship(
            id=active["id"], company_name=active["company_name"], position=active["position"],
            department=active["department"], start_date=active["start_date"],
            end_date=active["end_date"], status=active["status"],
            supervisor_id=active["supervisor_id"], supervisor_name=active["supervisor_name"]
        ) if active else None,
        evaluations=[
            StudentEvaluationSummary(
                id=e["id"], evaluation_code=e["evaluation_code"], date=e["evaluation_date"],
                overall_rating=e["overall_rating"], status=e["status"], feedback=e["feedback"]
            ) for e in evaluations[:settings.recent_evaluations]
        ],
        total_evaluations=len(evaluations)
    )
