"""
Business identifiers - human readable codes stored next to integer keys.

Format: <PREFIX>-<12 hex chars>, e.g. EVAL-3F9A0C17B2D4
"""

import uuid

PROGRAM_PREFIX = "INT"
EVALUATION_PREFIX = "EVAL"
ATTENDANCE_PREFIX = "ATT"
COMPANY_PREFIX = "COMP"


def generate_code(prefix: str) -> str:
    """Generate a unique code for the given prefix."""
    return f"{prefix}-{uuid.uuid4().hex[:12].upper()}"


def internship_code(program_id: str, student_id: int) -> str:
    """Per-student row code. Unique because a student appears once per program."""
    return f"{program_id}-S{student_id}"
