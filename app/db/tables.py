"""
Relational schema - SQLAlchemy Core tables.

Tables:
- users              - every account (student, coordinator, supervisor, admin)
- companies          - host organisations
- internships        - ONE ROW PER STUDENT; rows of the same internship
                       program share program_id
- evaluations        - supervisor evaluations with weighted categories (JSON)
- attendance_records - daily attendance per internship row

Enum-like columns are stored as plain strings so the same schema runs on
PostgreSQL and on SQLite (tests).
"""

import logging

from sqlalchemy import (
    MetaData, Table, Column, Integer, String, Text, Boolean, Date, DateTime,
    Float, JSON, ForeignKey, UniqueConstraint, func
)

logger = logging.getLogger(__name__)

metadata = MetaData()


users = Table(
    "users", metadata,
    Column("id", Integer, primary_key=True),
    Column("email", String(255), nullable=False, unique=True),
    Column("password_hash", String(255), nullable=False),
    Column("name", String(255), nullable=False),
    Column("role", String(20), nullable=False, index=True),
    Column("phone", String(20)),
    Column("is_active", Boolean, nullable=False, default=True),
    Column("created_at", DateTime, nullable=False, server_default=func.now()),
    Column("updated_at", DateTime, nullable=False, server_default=func.now()),
)

companies = Table(
    "companies", metadata,
    Column("id", Integer, primary_key=True),
    Column("company_code", String(50), nullable=False, unique=True),
    Column("name", String(255), nullable=False),
    Column("email", String(255), nullable=False),
    Column("phone", String(20), nullable=False),
    Column("address", Text, nullable=False),
    Column("city", String(100), nullable=False),
    Column("state", String(100), nullable=False),
    Column("country", String(100), nullable=False),
    Column("industry", String(100), nullable=False),
    Column("website", String(255)),
    Column("created_at", DateTime, nullable=False, server_default=func.now()),
)

internships = Table(
    "internships", metadata,
    Column("id", Integer, primary_key=True),
    Column("internship_code", String(80), nullable=False, unique=True),
    Column("program_id", String(50), nullable=False, index=True),
    Column("student_id", Integer, ForeignKey("users.id"), nullable=False),
    Column("company_id", Integer, ForeignKey("companies.id"), nullable=False),
    Column("supervisor_id", Integer, ForeignKey("users.id"), nullable=False),
    Column("position", String(255), nullable=False),
    Column("department", String(100), nullable=False),
    Column("start_date", Date, nullable=False),
    Column("end_date", Date, nullable=False),
    Column("status", String(20), nullable=False, default="pending"),
    Column("description", Text),
    Column("responsibilities", JSON),
    Column("requirements", JSON),
    Column("created_at", DateTime, nullable=False, server_default=func.now()),
    Column("updated_at", DateTime, nullable=False, server_default=func.now()),
    UniqueConstraint("program_id", "student_id", name="uq_internship_program_student"),
)

evaluations = Table(
    "evaluations", metadata,
    Column("id", Integer, primary_key=True),
    Column("evaluation_code", String(50), nullable=False, unique=True),
    Column("internship_id", Integer, ForeignKey("internships.id"), nullable=False),
    Column("evaluator_id", Integer, ForeignKey("users.id"), nullable=False),
    Column("student_id", Integer, ForeignKey("users.id"), nullable=False),
    Column("evaluation_date", DateTime, nullable=False),
    Column("due_date", DateTime, nullable=False),
    Column("status", String(20), nullable=False, default="draft"),
    Column("categories", JSON, nullable=False),
    Column("overall_rating", Float, nullable=False),
    Column("feedback", Text, nullable=False),
    Column("created_at", DateTime, nullable=False, server_default=func.now()),
    Column("updated_at", DateTime, nullable=False, server_default=func.now()),
)

attendance_records = Table(
    "attendance_records", metadata,
    Column("id", Integer, primary_key=True),
    Column("record_code", String(50), nullable=False, unique=True),
    Column("internship_id", Integer, ForeignKey("internships.id"), nullable=False),
    Column("date", Date, nullable=False),
    Column("status", String(20), nullable=False),
    Column("check_in_time", String(10)),
    Column("check_out_time", String(10)),
    Column("notes", Text),
    Column("marked_by", Integer, ForeignKey("users.id"), nullable=False),
    Column("created_at", DateTime, nullable=False, server_default=func.now()),
    UniqueConstraint("internship_id", "date", name="uq_attendance_internship_date"),
)


def init_db(bind=None):
    """
    Create all tables that do not exist yet.
    Call this once during app startup.
    """
    if bind is None:
        from app.db.postgres import engine
        bind = engine
    metadata.create_all(bind)
    logger.info("Database schema initialized")
