"""
Schemas module - Request/Response schemas for API endpoints.

Difference from tables:
- Tables (app.db.tables): storage layout
- Schemas: API contract (what client sends/receives)
"""

from app.schemas.schemas import EvaluationCategory, UserRole

__all__ = ["EvaluationCategory", "UserRole"]
