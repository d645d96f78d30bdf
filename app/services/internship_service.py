"""
Internship Service - internship programs and their per-student rows.

STORAGE MODEL:
An internship program (company + position + supervisor + dates) is shared
by a group of students but stored as ONE ROW PER STUDENT. All rows of a
program carry the same program_id; each row also has its own
internship_code. Attendance and evaluations hang off the per-student row.

Updating a program goes through reconcile_roster() so rows of students
who stay are updated in place.
"""

import logging
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy import select, insert, update, delete, func
from sqlalchemy.orm import Session

from app.db.tables import users, companies, internships, evaluations, attendance_records
from app.services.roster import RosterPlan
from app.utils.identifiers import generate_code, internship_code, PROGRAM_PREFIX, COMPANY_PREFIX

logger = logging.getLogger(__name__)

supervisors = users.alias("supervisors")
students = users.alias("students")


# ============================================================
# LOOKUPS
# ============================================================

def get_user(db: Session, user_id: int) -> Optional[dict]:
    row = db.execute(select(users).where(users.c.id == user_id)).mappings().first()
    return dict(row) if row else None


def get_company(db: Session, company_id: int) -> Optional[dict]:
    row = db.execute(select(companies).where(companies.c.id == company_id)).mappings().first()
    return dict(row) if row else None


def find_invalid_students(db: Session, student_ids: Iterable[int]) -> List[int]:
    """Return the ids (ascending) that are not existing student accounts."""
    wanted = set(student_ids)
    if not wanted:
        return []
    found = db.execute(
        select(users.c.id).where(users.c.id.in_(sorted(wanted)), users.c.role == "student")
    ).scalars().all()
    return sorted(wanted - set(found))


def find_or_create_company(db: Session, name: str) -> int:
    """
    Case-insensitive lookup by company name.
    Unknown companies are created with placeholder contact details.
    """
    existing = db.execute(
        select(companies.c.id).where(func.lower(companies.c.name) == name.lower())
    ).scalar()
    if existing is not None:
        return existing

    result = db.execute(
        insert(companies).values(
            company_code=generate_code(COMPANY_PREFIX),
            name=name,
            email=f"{''.join(name.lower().split())}@example.com",
            phone="000-000-0000",
            address="Address not provided",
            city="Unknown",
            state="Unknown",
            country="Unknown",
            industry="General",
        )
    )
    company_id = result.inserted_primary_key[0]
    logger.info("Created company %r (id=%s)", name, company_id)
    return company_id


def find_supervisor_by_name(db: Session, name: str) -> Optional[dict]:
    """
    Match a supervisor by name, case-insensitive, substring either way
    ("Smith" finds "John Smith", "Dr. John Smith" finds "John Smith").
    A blank name matches nobody.
    """
    needle = name.lower().strip()
    if not needle:
        return None
    rows = db.execute(
        select(users).where(users.c.role == "supervisor").order_by(users.c.id)
    ).mappings().all()
    for row in rows:
        candidate = row["name"].lower()
        if needle in candidate or candidate in needle:
            return dict(row)
    return None


# ============================================================
# READS
# ============================================================

def _row_query():
    return (
        select(
            internships,
            companies.c.name.label("company_name"),
            supervisors.c.name.label("supervisor_name"),
        )
        .join(companies, internships.c.company_id == companies.c.id)
        .join(supervisors, internships.c.supervisor_id == supervisors.c.id)
    )


def get_internship(db: Session, internship_id: int) -> Optional[dict]:
    row = db.execute(
        _row_query().where(internships.c.id == internship_id)
    ).mappings().first()
    return dict(row) if row else None


def get_program_rows(db: Session, program_id: str) -> List[dict]:
    rows = db.execute(
        _row_query().where(internships.c.program_id == program_id).order_by(internships.c.id)
    ).mappings().all()
    return [dict(r) for r in rows]


def get_internships_by_student(db: Session, student_id: int) -> List[dict]:
    rows = db.execute(
        _row_query().where(internships.c.student_id == student_id).order_by(internships.c.start_date.desc())
    ).mappings().all()
    return [dict(r) for r in rows]


def get_internships_by_supervisor(db: Session, supervisor_id: int, status: str = None) -> List[dict]:
    query = (
        select(
            internships,
            companies.c.name.label("company_name"),
            students.c.name.label("student_name"),
            students.c.email.label("student_email"),
        )
        .join(companies, internships.c.company_id == companies.c.id)
        .join(students, internships.c.student_id == students.c.id)
        .where(internships.c.supervisor_id == supervisor_id)
    )
    if status:
        query = query.where(internships.c.status == status)
    rows = db.execute(query.order_by(internships.c.id)).mappings().all()
    return [dict(r) for r in rows]


def list_placements(db: Session) -> List[dict]:
    rows = db.execute(
        select(
            internships.c.id,
            internships.c.position,
            internships.c.status,
            internships.c.start_date,
            internships.c.end_date,
            companies.c.name.label("company_name"),
            students.c.name.label("student_name"),
        )
        .join(companies, internships.c.company_id == companies.c.id)
        .join(students, internships.c.student_id == students.c.id)
        .order_by(internships.c.id)
    ).mappings().all()
    return [dict(r) for r in rows]


def group_by_program(rows: Iterable[dict]) -> List[Dict]:
    """
    Collapse per-student rows into one entry per program.

    The first row seen for a program represents it; input order is kept.
    """
    programs: Dict[str, dict] = {}
    for row in rows:
        entry = programs.get(row["program_id"])
        if entry is None:
            programs[row["program_id"]] = {"row": row, "student_count": 1}
        else:
            entry["student_count"] += 1
    return list(programs.values())


def list_programs(db: Session) -> List[Dict]:
    rows = db.execute(_row_query().order_by(internships.c.id)).mappings().all()
    return group_by_program(dict(r) for r in rows)


def compute_progress(start_date: date, end_date: date, today: date) -> int:
    """
    Share of program days elapsed, as an integer percentage in [0, 100].
    """
    total_days = (end_date - start_date).days
    if total_days <= 0:
        return 0
    elapsed = max(0, min((today - start_date).days, total_days))
    return min(100, int(elapsed * 100 / total_days + 0.5))


# ============================================================
# WRITES
# ============================================================

def _insert_row(db: Session, program_id: str, student_id: int, fields: dict) -> int:
    result = db.execute(
        insert(internships).values(
            internship_code=internship_code(program_id, student_id),
            program_id=program_id,
            student_id=student_id,
            **fields
        )
    )
    return result.inserted_primary_key[0]


def create_program(db: Session, student_ids: List[int], fields: dict) -> Tuple[str, List[int]]:
    """
    Create one internship row per student under a fresh program_id.

    Args:
        student_ids: validated, non-empty list of student user ids
        fields: column values shared by every row (company_id, supervisor_id,
                position, department, dates, status, description, ...)

    Returns:
        (program_id, list of new row ids in student-id order)
    """
    program_id = generate_code(PROGRAM_PREFIX)
    row_ids = [_insert_row(db, program_id, sid, fields) for sid in sorted(set(student_ids))]
    logger.info("Created internship program %s with %d student(s)", program_id, len(row_ids))
    return program_id, row_ids


def delete_internship_row(db: Session, internship_id: int) -> None:
    """Delete one per-student row together with its attendance and evaluations."""
    db.execute(delete(attendance_records).where(attendance_records.c.internship_id == internship_id))
    db.execute(delete(evaluations).where(evaluations.c.internship_id == internship_id))
    db.execute(delete(internships).where(internships.c.id == internship_id))


def apply_roster_plan(
    db: Session,
    template: dict,
    program_rows: List[dict],
    plan: RosterPlan,
    updates: dict
) -> None:
    """
    Write a reconciled roster back to storage.

    - to_keep: field updates applied uniformly (skipped when nothing changed)
    - to_add: new rows copying the template row merged with the updates
    - to_remove: rows deleted with their dependents
    """
    by_student = {row["student_id"]: row for row in program_rows}
    program_id = template["program_id"]

    if updates:
        stamped = dict(updates, updated_at=datetime.utcnow())
        for student_id in plan.sorted_keep():
            db.execute(
                update(internships)
                .where(internships.c.id == by_student[student_id]["id"])
                .values(**stamped)
            )

    base_fields = {
        "company_id": template["company_id"],
        "supervisor_id": template["supervisor_id"],
        "position": template["position"],
        "department": template["department"],
        "start_date": template["start_date"],
        "end_date": template["end_date"],
        "status": template["status"],
        "description": template["description"],
        "responsibilities": template["responsibilities"],
        "requirements": template["requirements"],
    }
    base_fields.update(updates)
    for student_id in plan.sorted_add():
        _insert_row(db, program_id, student_id, base_fields)

    for student_id in plan.sorted_remove():
        delete_internship_row(db, by_student[student_id]["id"])

    logger.info(
        "Program %s roster updated: +%d -%d ~%d",
        program_id, len(plan.to_add), len(plan.to_remove), len(plan.to_keep)
    )


def set_status(db: Session, internship_id: int, status: str) -> bool:
    result = db.execute(
        update(internships)
        .where(internships.c.id == internship_id)
        .values(status=status, updated_at=datetime.utcnow())
    )
    return result.rowcount > 0
