"""
Evaluation Routes (supervisors)

POST /evaluations - Evaluate an intern (overall rating computed server-side)
GET /evaluations - List my evaluations
GET /evaluations/{evaluation_id} - Evaluation detail
PUT /evaluations/{evaluation_id} - Update categories, feedback or status
"""

from typing import List

from fastapi import APIRouter, HTTPException, Depends

from app.core.auth import get_current_supervisor
from app.db.postgres import get_db_session
from app.services import evaluation_service
from app.services.internship_service import get_internship
from app.schemas.schemas import (
    EvaluationCreate, EvaluationUpdate, EvaluationResponse, EvaluationListItem
)

router = APIRouter(prefix="/evaluations", tags=["Evaluations"])


def _to_response(row: dict) -> EvaluationResponse:
    return EvaluationResponse(
        id=row["id"], evaluation_code=row["evaluation_code"], internship_id=row["internship_id"],
        evaluator_id=row["evaluator_id"], student_id=row["student_id"],
        student_name=row["student_name"], position=row["position"], company=row["company_name"],
        evaluation_date=row["evaluation_date"], due_date=row["due_date"], status=row["status"],
        categories=row["categories"] or [], overall_rating=row["overall_rating"],
        feedback=row["feedback"], created_at=row["created_at"], updated_at=row["updated_at"]
    )


def _load_owned(db, evaluation_id: int, supervisor: dict) -> dict:
    evaluation = evaluation_service.get_evaluation(db, evaluation_id)
    if not evaluation:
        raise HTTPException(status_code=404, detail="Evaluation not found")
    if evaluation["evaluator_id"] != supervisor["user_id"]:
        raise HTTPException(status_code=403, detail="You can only access your own evaluations")
    return evaluation


@router.post("", response_model=EvaluationResponse, status_code=201)
async def create_evaluation(data: EvaluationCreate, supervisor: dict = Depends(get_current_supervisor)):
    """
    Evaluate an intern you supervise.

    Each category has a rating (1-5) and a weight (0-1); the overall rating
    is their weighted average rounded to one decimal.
    """
    with get_db_session() as db:
        internship = get_internship(db, data.internship_id)
        if not internship:
            raise HTTPException(status_code=404, detail="Internship not found")
        if internship["supervisor_id"] != supervisor["user_id"]:
            raise HTTPException(status_code=403, detail="You can only evaluate your own interns")

        evaluation_id = evaluation_service.create_evaluation(db, data, internship, supervisor["user_id"])
        row = evaluation_service.get_evaluation(db, evaluation_id)

    return _to_response(row)


@router.get("", response_model=List[EvaluationListItem])
async def list_evaluations(supervisor: dict = Depends(get_current_supervisor)):
    """List evaluations written by the current supervisor."""
    with get_db_session() as db:
        rows = evaluation_service.get_evaluations_by_evaluator(db, supervisor["user_id"])

    return [
        EvaluationListItem(
            id=r["id"], student_name=r["student_name"], position=r["position"],
            due_date=r["due_date"], status=r["status"],
            rating=r["overall_rating"] if r["status"] != "draft" else None
        ) for r in rows
    ]


@router.get("/{evaluation_id}", response_model=EvaluationResponse)
async def get_evaluation(evaluation_id: int, supervisor: dict = Depends(get_current_supervisor)):
    with get_db_session() as db:
        row = _load_owned(db, evaluation_id, supervisor)
    return _to_response(row)


@router.put("/{evaluation_id}", response_model=EvaluationResponse)
async def update_evaluation(
    evaluation_id: int,
    data: EvaluationUpdate,
    supervisor: dict = Depends(get_current_supervisor)
):
    """Update an evaluation. Only provided fields change."""
    if data.categories is None and data.feedback is None and data.status is None:
        raise HTTPException(status_code=400, detail="No fields to update")

    with get_db_session() as db:
        _load_owned(db, evaluation_id, supervisor)
        evaluation_service.update_evaluation(db, evaluation_id, data)
        row = evaluation_service.get_evaluation(db, evaluation_id)

    return _to_response(row)
