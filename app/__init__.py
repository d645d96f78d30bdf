"""
Internship Placement Platform
Placement and monitoring of student internships.

Architecture:
- PostgreSQL: users, companies, internships, evaluations, attendance
- FastAPI: role-scoped REST API (student, coordinator, supervisor, admin)
"""

__version__ = "1.0.0"
