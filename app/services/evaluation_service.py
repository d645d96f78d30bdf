"""
Evaluation Service - supervisor evaluations of interns.

The overall rating is ALWAYS computed server-side from the categories
(compute_overall_rating) and stored next to the raw category list, so a
stored evaluation can never disagree with its own categories.
"""

import logging
from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy import select, insert, update
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.db.tables import users, companies, internships, evaluations
from app.services.scoring import compute_overall_rating
from app.utils.identifiers import generate_code, EVALUATION_PREFIX

logger = logging.getLogger(__name__)

settings = get_settings()

students = users.alias("students")
evaluators = users.alias("evaluators")


def _evaluation_query():
    return (
        select(
            evaluations,
            students.c.name.label("student_name"),
            students.c.email.label("student_email"),
            evaluators.c.name.label("evaluator_name"),
            internships.c.position.label("position"),
            companies.c.name.label("company_name"),
        )
        .join(students, evaluations.c.student_id == students.c.id)
        .join(evaluators, evaluations.c.evaluator_id == evaluators.c.id)
        .join(internships, evaluations.c.internship_id == internships.c.id)
        .join(companies, internships.c.company_id == companies.c.id)
    )


def get_evaluation(db: Session, evaluation_id: int) -> Optional[dict]:
    row = db.execute(
        _evaluation_query().where(evaluations.c.id == evaluation_id)
    ).mappings().first()
    return dict(row) if row else None


def get_evaluations_by_evaluator(db: Session, evaluator_id: int) -> List[dict]:
    rows = db.execute(
        _evaluation_query()
        .where(evaluations.c.evaluator_id == evaluator_id)
        .order_by(evaluations.c.created_at.desc(), evaluations.c.id.desc())
    ).mappings().all()
    return [dict(r) for r in rows]


def get_evaluations_by_student(db: Session, student_id: int) -> List[dict]:
    rows = db.execute(
        _evaluation_query()
        .where(evaluations.c.student_id == student_id)
        .order_by(evaluations.c.evaluation_date.desc(), evaluations.c.id.desc())
    ).mappings().all()
    return [dict(r) for r in rows]


def get_evaluations_by_internship(db: Session, internship_id: int) -> List[dict]:
    """Non-draft evaluations of one internship row, newest first."""
    rows = db.execute(
        _evaluation_query()
        .where(evaluations.c.internship_id == internship_id, evaluations.c.status != "draft")
        .order_by(evaluations.c.evaluation_date.desc(), evaluations.c.id.desc())
    ).mappings().all()
    return [dict(r) for r in rows]


def latest_rating(db: Session, internship_id: int) -> Optional[float]:
    """Overall rating of the newest non-draft evaluation of an internship row."""
    return db.execute(
        select(evaluations.c.overall_rating)
        .where(
            evaluations.c.internship_id == internship_id,
            evaluations.c.status != "draft",
        )
        .order_by(evaluations.c.evaluation_date.desc(), evaluations.c.id.desc())
        .limit(1)
    ).scalar()


def _dump_categories(categories) -> list:
    return [c.model_dump() for c in categories]


def create_evaluation(db: Session, data, internship: dict, evaluator_id: int) -> int:
    """
    Store a new evaluation for one internship row.

    Returns:
        New evaluation id
    """
    now = datetime.utcnow()
    overall = compute_overall_rating(data.categories)

    result = db.execute(
        insert(evaluations).values(
            evaluation_code=generate_code(EVALUATION_PREFIX),
            internship_id=internship["id"],
            evaluator_id=evaluator_id,
            student_id=internship["student_id"],
            evaluation_date=now,
            due_date=now + timedelta(days=settings.evaluation_due_days),
            status=data.status.value,
            categories=_dump_categories(data.categories),
            overall_rating=overall,
            feedback=data.feedback,
        )
    )
    evaluation_id = result.inserted_primary_key[0]
    logger.info(
        "Evaluation %s created for internship %s (overall %.1f)",
        evaluation_id, internship["id"], overall
    )
    return evaluation_id


def update_evaluation(db: Session, evaluation_id: int, data) -> None:
    """Apply provided fields; a new category list re-computes the overall rating."""
    values = {"updated_at": datetime.utcnow()}

    if data.categories is not None:
        values["categories"] = _dump_categories(data.categories)
        values["overall_rating"] = compute_overall_rating(data.categories)
    if data.feedback is not None:
        values["feedback"] = data.feedback
    if data.status is not None:
        values["status"] = data.status.value

    db.execute(update(evaluations).where(evaluations.c.id == evaluation_id).values(**values))
    logger.info("Evaluation %s updated: %s", evaluation_id, sorted(values))
