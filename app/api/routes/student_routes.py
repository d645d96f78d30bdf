"""
Student Routes

GET /students/internships - My internships
GET /students/evaluations - Evaluations I received
GET /students/attendance - Attendance summary for my active internship
"""

from datetime import date
from typing import List

from fastapi import APIRouter, Depends

from app.core.auth import get_current_student
from app.core.config import get_settings
from app.db.postgres import get_db_session
from app.services.attendance_service import (
    get_attendance_by_internship, summarize_attendance, weekly_attendance
)
from app.services.evaluation_service import get_evaluations_by_student
from app.services.internship_service import get_internships_by_student
from app.schemas.schemas import (
    InternshipRow, StudentEvaluationItem, CategoryRating, StudentAttendanceResponse,
    AttendanceCounts, WeeklyAttendance
)

settings = get_settings()

router = APIRouter(prefix="/students", tags=["Students"])


@router.get("/internships", response_model=List[InternshipRow])
async def get_my_internships(student: dict = Depends(get_current_student)):
    with get_db_session() as db:
        rows = get_internships_by_student(db, student["user_id"])
    return [InternshipRow(**row) for row in rows]


@router.get("/evaluations", response_model=List[StudentEvaluationItem])
async def get_my_evaluations(student: dict = Depends(get_current_student)):
    """Evaluations of the current student. Drafts show no rating or feedback."""
    with get_db_session() as db:
        rows = get_evaluations_by_student(db, student["user_id"])

    items = []
    for r in rows:
        visible = r["status"] != "draft"
        items.append(StudentEvaluationItem(
            id=r["id"],
            evaluator=r["evaluator_name"],
            date=r["evaluation_date"],
            status=r["status"],
            overall_rating=r["overall_rating"] if visible else None,
            categories=[
                CategoryRating(name=c["name"], rating=c["rating"]) for c in r["categories"]
            ] if visible else [],
            comments=r["feedback"] if visible else ""
        ))
    return items


@router.get("/attendance", response_model=StudentAttendanceResponse)
async def get_my_attendance(student: dict = Depends(get_current_student)):
    """
    Attendance for the current student's active internship.

    percentage = present / (present + absent + leave) * 100, holidays excluded.
    """
    with get_db_session() as db:
        internships = get_internships_by_student(db, student["user_id"])
        active = next((i for i in internships if i["status"] == "active"), None)
        if not active:
            return StudentAttendanceResponse(
                attendance_summary=AttendanceCounts(),
                weekly_attendance=[],
                attendance_percentage=0
            )
        records = get_attendance_by_internship(db, active["id"])

    summary = summarize_attendance(records)
    weekly = weekly_attendance(records, date.today(), settings.attendance_weeks)

    return StudentAttendanceResponse(
        attendance_summary=AttendanceCounts(
            present=summary["present"], absent=summary["absent"], leave=summary["leave"]
        ),
        weekly_attendance=[WeeklyAttendance(**w) for w in weekly],
        attendance_percentage=summary["attendance_percentage"]
    )
