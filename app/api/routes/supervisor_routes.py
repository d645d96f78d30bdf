"""
Supervisor Routes

GET /supervisors/interns - My active interns with their latest rating
GET /supervisors/interns/{internship_id}/evaluations - Evaluation history of one intern
POST /supervisors/attendance - Mark attendance for one of my interns
"""

from typing import List

from fastapi import APIRouter, HTTPException, Depends
from sqlalchemy.exc import IntegrityError

from app.core.auth import get_current_supervisor
from app.db.postgres import get_db_session
from app.services import attendance_service
from app.services.evaluation_service import latest_rating, get_evaluations_by_internship
from app.services.internship_service import get_internship, get_internships_by_supervisor
from app.schemas.schemas import (
    InternResponse, InternEvaluationItem, AttendanceMark, AttendanceRecordResponse
)

router = APIRouter(prefix="/supervisors", tags=["Supervisors"])


def _load_own_intern(db, internship_id: int, supervisor: dict, action: str) -> dict:
    internship = get_internship(db, internship_id)
    if not internship:
        raise HTTPException(status_code=404, detail="Internship not found")
    if internship["supervisor_id"] != supervisor["user_id"]:
        raise HTTPException(status_code=403, detail=f"You can only {action} your own interns")
    return internship


@router.get("/interns", response_model=List[InternResponse])
async def get_my_interns(supervisor: dict = Depends(get_current_supervisor)):
    with get_db_session() as db:
        rows = get_internships_by_supervisor(db, supervisor["user_id"], status="active")
        interns = [
            InternResponse(
                id=r["id"], student_id=r["student_id"], name=r["student_name"],
                email=r["student_email"], company=r["company_name"], position=r["position"],
                start_date=r["start_date"], performance_rating=latest_rating(db, r["id"])
            ) for r in rows
        ]
    return interns


@router.get("/interns/{internship_id}/evaluations", response_model=List[InternEvaluationItem])
async def get_intern_evaluations(internship_id: int, supervisor: dict = Depends(get_current_supervisor)):
    """Submitted and reviewed evaluations of one of my interns, newest first."""
    with get_db_session() as db:
        _load_own_intern(db, internship_id, supervisor, "view evaluations of")
        rows = get_evaluations_by_internship(db, internship_id)

    return [
        InternEvaluationItem(
            id=r["id"], evaluation_code=r["evaluation_code"], status=r["status"],
            overall_rating=r["overall_rating"], feedback=r["feedback"],
            categories=r["categories"] or [], created_at=r["created_at"]
        ) for r in rows
    ]


@router.post("/attendance", response_model=AttendanceRecordResponse, status_code=201)
async def mark_attendance(data: AttendanceMark, supervisor: dict = Depends(get_current_supervisor)):
    """Mark one day of attendance. One record per internship per date."""
    try:
        with get_db_session() as db:
            _load_own_intern(db, data.internship_id, supervisor, "mark attendance for")
            if attendance_service.find_record(db, data.internship_id, data.date):
                raise HTTPException(status_code=400, detail="Attendance already marked for this date")

            record = attendance_service.mark_attendance(db, data, supervisor["user_id"])
    except IntegrityError:
        # uq_attendance_internship_date: a concurrent request marked the same day
        raise HTTPException(status_code=400, detail="Attendance already marked for this date")

    return AttendanceRecordResponse(**record)
