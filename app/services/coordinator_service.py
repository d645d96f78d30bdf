"""
Coordinator Service - dashboard counts, analytics and the student roster.

Counts and averages are single aggregate queries run through
execute_raw_sql(); the student roster is built from Core selects.

A "semester" for the dashboard is the trailing `semester_months` window.
For growth analytics each creation date falls in a calendar semester:
January-June is "Spring <year>", July-December is "Fall <year>".
"""

import calendar
from datetime import datetime
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.db.postgres import execute_raw_sql
from app.db.tables import users, companies, internships
from app.services.scoring import round_half_up

settings = get_settings()

_SQL_TIMESTAMP = "%Y-%m-%d %H:%M:%S"


# ============================================================
# HELPERS
# ============================================================

def months_before(moment: datetime, months: int) -> datetime:
    """Same day `months` calendar months earlier, clamped to the month's last day."""
    index = moment.year * 12 + moment.month - 1 - months
    year, month = divmod(index, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def percentage(part: int, whole: int) -> int:
    """Integer percentage, half-up; 0 when there is nothing to divide by."""
    if not whole:
        return 0
    return int(round_half_up(Decimal(part) * 100 / Decimal(whole), 0))


def internship_growth(created: Iterable[datetime]) -> List[dict]:
    """
    Count creation timestamps per calendar semester.

    Returns [{"semester", "internships"}] in chronological order.
    """
    counts: Dict[tuple, int] = {}
    for moment in created:
        key = (moment.year, 0 if moment.month <= 6 else 1)
        counts[key] = counts.get(key, 0) + 1
    return [
        {"semester": f"{'Spring' if half == 0 else 'Fall'} {year}", "internships": counts[(year, half)]}
        for year, half in sorted(counts)
    ]


# ============================================================
# DASHBOARD / ANALYTICS
# ============================================================

def dashboard_summary(now: Optional[datetime] = None) -> dict:
    """
    Headline numbers for the coordinator dashboard.

    placement_rate: active internship rows per registered student, as a percentage.
    average_rating: mean overall rating of reviewed evaluations, or None.
    """
    now = now or datetime.utcnow()
    since = months_before(now, settings.semester_months)

    row = execute_raw_sql("""
        SELECT
            (SELECT COUNT(*) FROM users WHERE role = 'student') AS total_students,
            (SELECT COUNT(*) FROM users
                WHERE role = 'student' AND created_at >= :since) AS new_students,
            (SELECT COUNT(*) FROM internships WHERE status = 'active') AS active_internships,
            (SELECT COUNT(*) FROM internships
                WHERE status = 'completed' AND updated_at >= :since) AS completed_recent,
            (SELECT AVG(overall_rating) FROM evaluations WHERE status = 'reviewed') AS average_rating
    """, {"since": since.strftime(_SQL_TIMESTAMP)})[0]

    average = row["average_rating"]
    return {
        "total_students": row["total_students"],
        "new_students_this_semester": row["new_students"],
        "active_internships": row["active_internships"],
        "placement_rate": percentage(row["active_internships"], row["total_students"]),
        "completed_this_semester": row["completed_recent"],
        "average_rating": round_half_up(average, 1) if average is not None else None,
    }


def placements_per_company(limit: int = 10) -> List[dict]:
    return execute_raw_sql("""
        SELECT c.name AS company, COUNT(i.id) AS placements
        FROM internships i JOIN companies c ON c.id = i.company_id
        GROUP BY c.id, c.name
        ORDER BY placements DESC, c.name
        LIMIT :limit
    """, {"limit": limit})


def evaluation_scores_by_company() -> List[dict]:
    """Average reviewed rating per company, best first."""
    rows = execute_raw_sql("""
        SELECT c.name AS company, AVG(e.overall_rating) AS average_score, COUNT(e.id) AS evaluation_count
        FROM evaluations e
        JOIN internships i ON i.id = e.internship_id
        JOIN companies c ON c.id = i.company_id
        WHERE e.status = 'reviewed'
        GROUP BY c.id, c.name
    """)
    scores = [
        {
            "company": r["company"],
            "average_score": round_half_up(r["average_score"], 1),
            "evaluation_count": r["evaluation_count"],
        } for r in rows
    ]
    scores.sort(key=lambda s: (-s["average_score"], s["company"]))
    return scores


def analytics_summary(db: Session, now: Optional[datetime] = None) -> dict:
    now = now or datetime.utcnow()

    counts = execute_raw_sql("""
        SELECT
            (SELECT COUNT(*) FROM internships) AS total_internships,
            (SELECT COUNT(*) FROM internships WHERE status = 'active') AS active,
            (SELECT COUNT(*) FROM internships WHERE status = 'completed') AS completed,
            (SELECT COUNT(*) FROM evaluations) AS total_evaluations,
            (SELECT COUNT(*) FROM evaluations WHERE status = 'reviewed') AS reviewed
    """)[0]

    created = db.execute(
        select(internships.c.created_at)
        .where(internships.c.created_at >= months_before(now, 12 * settings.growth_years))
    ).scalars().all()

    return {
        "internship_growth": internship_growth(created),
        "placement_success_rate": percentage(
            counts["active"] + counts["completed"], counts["total_internships"]
        ),
        "evaluation_completion_rate": percentage(counts["reviewed"], counts["total_evaluations"]),
        "placements_per_company": placements_per_company(),
        "evaluation_scores_by_company": evaluation_scores_by_company(),
        "active_vs_completed": {"active": counts["active"], "completed": counts["completed"]},
    }


# ============================================================
# STUDENT ROSTER
# ============================================================

def placement_label(statuses: Iterable[str]) -> str:
    """
    One word for where a student stands:
    "active" with any active internship, else "completed" with any
    completed one, else "pending".
    """
    statuses = set(statuses)
    if "active" in statuses:
        return "active"
    if "completed" in statuses:
        return "completed"
    return "pending"


def list_students(db: Session) -> List[dict]:
    """Every student with the company and start date of their active internship."""
    student_rows = db.execute(
        select(users).where(users.c.role == "student").order_by(users.c.id)
    ).mappings().all()
    placement_rows = db.execute(
        select(
            internships.c.student_id,
            internships.c.status,
            internships.c.start_date,
            companies.c.name.label("company_name"),
        )
        .join(companies, internships.c.company_id == companies.c.id)
        .order_by(internships.c.id)
    ).mappings().all()

    by_student: Dict[int, list] = {}
    for row in placement_rows:
        by_student.setdefault(row["student_id"], []).append(row)

    result = []
    for student in student_rows:
        rows = by_student.get(student["id"], [])
        active = next((r for r in rows if r["status"] == "active"), None)
        result.append({
            "id": student["id"],
            "name": student["name"],
            "email": student["email"],
            "phone": student["phone"] or "Not provided",
            "internship": active["company_name"] if active else None,
            "status": placement_label(r["status"] for r in rows),
            "start_date": active["start_date"] if active else None,
        })
    return result
