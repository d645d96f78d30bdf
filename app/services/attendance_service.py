"""
Attendance Service

Pure summaries over attendance records plus the queries that load them.

Percentage rule: present / (present + absent + leave) * 100, one decimal.
Holidays are neither attended nor missed, so they are left out of the
denominator.
"""

import logging
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional

from sqlalchemy import select, insert
from sqlalchemy.orm import Session

from app.db.tables import attendance_records
from app.services.scoring import round_half_up
from app.utils.identifiers import generate_code, ATTENDANCE_PREFIX

logger = logging.getLogger(__name__)

COUNTED_STATUSES = ("present", "absent", "leave")


# ============================================================
# PURE SUMMARIES
# ============================================================

def attendance_percentage(present: int, counted_days: int) -> float:
    if counted_days <= 0:
        return 0.0
    return round_half_up(present * 100 / counted_days, 1)


def summarize_attendance(records: Iterable[dict]) -> dict:
    """
    Count present / absent / leave days and the attendance percentage.

    Returns:
        {"present": int, "absent": int, "leave": int, "attendance_percentage": float}
    """
    counts = {status: 0 for status in COUNTED_STATUSES}
    for record in records:
        if record["status"] in counts:
            counts[record["status"]] += 1

    counted_days = sum(counts.values())
    counts["attendance_percentage"] = attendance_percentage(counts["present"], counted_days)
    return counts


def weekly_attendance(records: Iterable[dict], today: date, weeks: int = 6) -> List[Dict]:
    """
    Break attendance into the last `weeks` 7-day windows, oldest first.

    The newest window is [today - 7, today - 1]. Labels run "Week 1" .. "Week N".
    """
    records = list(records)
    result = []
    for offset in range(weeks - 1, -1, -1):
        week_start = today - timedelta(days=(offset + 1) * 7)
        week_end = week_start + timedelta(days=6)
        in_week = [r for r in records if week_start <= r["date"] <= week_end]
        result.append({
            "week": f"Week {weeks - offset}",
            "present": sum(1 for r in in_week if r["status"] == "present"),
            "absent": sum(1 for r in in_week if r["status"] == "absent"),
            "leave": sum(1 for r in in_week if r["status"] == "leave"),
        })
    return result


def hours_logged(records: Iterable[dict], hours_per_day: int) -> int:
    """Present days times the standard working day."""
    return sum(1 for r in records if r["status"] == "present") * hours_per_day


# ============================================================
# QUERIES
# ============================================================

def get_attendance_by_internship(db: Session, internship_id: int) -> List[dict]:
    rows = db.execute(
        select(attendance_records)
        .where(attendance_records.c.internship_id == internship_id)
        .order_by(attendance_records.c.date)
    ).mappings().all()
    return [dict(r) for r in rows]


def find_record(db: Session, internship_id: int, on_date: date) -> Optional[dict]:
    row = db.execute(
        select(attendance_records).where(
            attendance_records.c.internship_id == internship_id,
            attendance_records.c.date == on_date,
        )
    ).mappings().first()
    return dict(row) if row else None


def mark_attendance(db: Session, data, marked_by: int) -> dict:
    """Insert one attendance record. Caller checks for duplicates first."""
    values = {
        "record_code": generate_code(ATTENDANCE_PREFIX),
        "internship_id": data.internship_id,
        "date": data.date,
        "status": data.status.value,
        "check_in_time": data.check_in_time,
        "check_out_time": data.check_out_time,
        "notes": data.notes,
        "marked_by": marked_by,
    }
    result = db.execute(insert(attendance_records).values(**values))
    values["id"] = result.inserted_primary_key[0]
    logger.info(
        "Attendance %s marked for internship %s on %s by user %s",
        values["status"], data.internship_id, data.date, marked_by
    )
    return values
