"""
Internship Routes (coordinators and admins)

POST /internships - Create an internship program for one or more students
GET /internships - List programs, one entry per program
GET /internships/placements - List every per-student placement
PATCH /internships/placements/{internship_id} - Confirm / reject a placement
GET /internships/{internship_id} - Program detail with student progress
PUT /internships/{internship_id} - Update program fields and roster
"""

from datetime import date
from typing import List

from fastapi import APIRouter, HTTPException, Depends

from app.core.auth import get_current_coordinator
from app.core.config import get_settings
from app.db.postgres import get_db_session
from app.services import internship_service as svc
from app.services.attendance_service import get_attendance_by_internship, hours_logged
from app.services.roster import reconcile_roster
from app.schemas.schemas import (
    InternshipCreate, InternshipUpdate, InternshipRow, InternshipCreateResponse,
    InternshipUpdateResponse, ProgramSummary, ProgramDetail, ProgramStudent,
    PlacementResponse, PlacementStatusUpdate, MessageResponse
)

settings = get_settings()

router = APIRouter(prefix="/internships", tags=["Internships"])

# internship status -> placement status shown to coordinators
PLACEMENT_STATUS = {
    "pending": "pending",
    "active": "confirmed",
    "terminated": "rejected",
    "completed": "completed",
}
INTERNSHIP_STATUS = {v: k for k, v in PLACEMENT_STATUS.items()}


def _check_students(db, student_ids: List[int]):
    if not student_ids:
        raise HTTPException(status_code=400, detail="At least one student must be selected")
    invalid = svc.find_invalid_students(db, student_ids)
    if invalid:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid student ID: {invalid[0]}. Student not found."
        )


def _supervisor_not_found(name: str) -> HTTPException:
    return HTTPException(
        status_code=400,
        detail=f'Supervisor "{name}" not found. Please ensure the supervisor is registered in the system.'
    )


@router.post("", response_model=InternshipCreateResponse, status_code=201)
async def create_internship(data: InternshipCreate, coordinator: dict = Depends(get_current_coordinator)):
    """
    Create an internship program.

    Company: `company_id`, or `company` name (created if unknown).
    Supervisor: `supervisor_id`, or `supervisor` name (must exist).
    One internship row is created per student in `student_ids`.
    """
    with get_db_session() as db:
        # Company
        if data.company_id is not None:
            if not svc.get_company(db, data.company_id):
                raise HTTPException(status_code=400, detail="Company not found")
            company_id = data.company_id
        elif data.company:
            company_id = svc.find_or_create_company(db, data.company)
        else:
            raise HTTPException(status_code=400, detail="Company name or ID is required")

        # Supervisor
        if data.supervisor_id is not None:
            supervisor = svc.get_user(db, data.supervisor_id)
            if not supervisor or supervisor["role"] != "supervisor":
                raise HTTPException(status_code=400, detail="Supervisor not found")
        elif data.supervisor:
            supervisor = svc.find_supervisor_by_name(db, data.supervisor)
            if not supervisor:
                raise _supervisor_not_found(data.supervisor)
        else:
            raise HTTPException(status_code=400, detail="Supervisor name or ID is required")

        _check_students(db, data.student_ids)

        program_id, _ = svc.create_program(db, data.student_ids, {
            "company_id": company_id,
            "supervisor_id": supervisor["id"],
            "position": data.position,
            "department": data.department or "General",
            "start_date": data.start_date,
            "end_date": data.end_date,
            "status": data.status.value,
            "description": data.description,
            "responsibilities": data.responsibilities,
            "requirements": data.requirements,
        })
        rows = svc.get_program_rows(db, program_id)

    return InternshipCreateResponse(
        message="Internship created successfully",
        program_id=program_id,
        count=len(rows),
        internships=[InternshipRow(**row) for row in rows]
    )


@router.get("", response_model=List[ProgramSummary])
async def list_internships(coordinator: dict = Depends(get_current_coordinator)):
    """List internship programs with the number of students in each."""
    with get_db_session() as db:
        programs = svc.list_programs(db)

    return [
        ProgramSummary(
            id=p["row"]["id"], program_id=p["row"]["program_id"], company=p["row"]["company_name"],
            position=p["row"]["position"], student_count=p["student_count"], status=p["row"]["status"],
            start_date=p["row"]["start_date"], end_date=p["row"]["end_date"],
            supervisor=p["row"]["supervisor_name"]
        ) for p in programs
    ]


@router.get("/placements", response_model=List[PlacementResponse])
async def list_placements(coordinator: dict = Depends(get_current_coordinator)):
    """List every student placement with its placement status."""
    with get_db_session() as db:
        rows = svc.list_placements(db)

    return [
        PlacementResponse(
            id=r["id"], student_name=r["student_name"], company=r["company_name"],
            position=r["position"], status=PLACEMENT_STATUS.get(r["status"], "pending"),
            start_date=r["start_date"], end_date=r["end_date"]
        ) for r in rows
    ]


@router.patch("/placements/{internship_id}", response_model=MessageResponse)
async def update_placement(
    internship_id: int,
    data: PlacementStatusUpdate,
    coordinator: dict = Depends(get_current_coordinator)
):
    """Confirm (-> active), reject (-> terminated) or reset a single placement."""
    with get_db_session() as db:
        if not svc.set_status(db, internship_id, INTERNSHIP_STATUS[data.status.value]):
            raise HTTPException(status_code=404, detail="Placement not found")

    return MessageResponse(message=f"Placement {data.status.value}")


@router.get("/{internship_id}", response_model=ProgramDetail)
async def get_internship(internship_id: int, coordinator: dict = Depends(get_current_coordinator)):
    """Program detail for the program containing this internship row."""
    today = date.today()
    with get_db_session() as db:
        internship = svc.get_internship(db, internship_id)
        if not internship:
            raise HTTPException(status_code=404, detail="Internship not found")

        company = svc.get_company(db, internship["company_id"])
        supervisor = svc.get_user(db, internship["supervisor_id"])

        students = []
        for row in svc.get_program_rows(db, internship["program_id"]):
            student = svc.get_user(db, row["student_id"])
            if not student:
                continue
            records = get_attendance_by_internship(db, row["id"])
            students.append(ProgramStudent(
                id=student["id"], name=student["name"], email=student["email"],
                progress=svc.compute_progress(row["start_date"], row["end_date"], today),
                hours_logged=hours_logged(records, settings.hours_per_day)
            ))

    company_address = (
        f"{company['address']}, {company['city']}, {company['state']} {company['country']}"
        if company else "Address not available"
    )

    return ProgramDetail(
        id=internship["id"],
        program_id=internship["program_id"],
        company=internship["company_name"],
        position=internship["position"],
        department=internship["department"],
        student_count=len(students),
        status=internship["status"],
        start_date=internship["start_date"],
        end_date=internship["end_date"],
        supervisor=internship["supervisor_name"],
        supervisor_email=supervisor["email"] if supervisor else "Email not available",
        supervisor_phone=(supervisor or {}).get("phone") or "Phone not available",
        company_address=company_address,
        description=internship["description"] or "No description available.",
        students=students
    )


@router.put("/{internship_id}", response_model=InternshipUpdateResponse)
async def update_internship(
    internship_id: int,
    data: InternshipUpdate,
    coordinator: dict = Depends(get_current_coordinator)
):
    """
    Update an internship program and reconcile its student roster.

    Students that stay keep their row (and its attendance/evaluations);
    new students get a row, removed students lose theirs.
    """
    with get_db_session() as db:
        current = svc.get_internship(db, internship_id)
        if not current:
            raise HTTPException(status_code=404, detail="Internship not found")

        _check_students(db, data.student_ids)

        updates = {}
        if data.company and data.company.lower() != current["company_name"].lower():
            updates["company_id"] = svc.find_or_create_company(db, data.company)
        if data.supervisor and data.supervisor.lower() != current["supervisor_name"].lower():
            supervisor = svc.find_supervisor_by_name(db, data.supervisor)
            if not supervisor:
                raise _supervisor_not_found(data.supervisor)
            if supervisor["id"] != current["supervisor_id"]:
                updates["supervisor_id"] = supervisor["id"]
        for field in ["position", "start_date", "end_date", "description"]:
            value = getattr(data, field)
            if value is not None:
                updates[field] = value
        if data.status is not None:
            updates["status"] = data.status.value

        start = updates.get("start_date", current["start_date"])
        end = updates.get("end_date", current["end_date"])
        if end < start:
            raise HTTPException(status_code=400, detail="End date must not be before start date")

        program_rows = svc.get_program_rows(db, current["program_id"])
        plan = reconcile_roster(
            (row["student_id"] for row in program_rows),
            data.student_ids
        )
        svc.apply_roster_plan(db, current, program_rows, plan, updates)

    added, removed, updated = len(plan.to_add), len(plan.to_remove), len(plan.to_keep)
    return InternshipUpdateResponse(
        message="Internship updated successfully",
        count=added + removed + updated,
        added=added,
        removed=removed,
        updated=updated
    )
