"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator
from typing import Optional, List
from datetime import date, datetime
from enum import Enum


# ============================================================
# ENUMS
# ============================================================

class UserRole(str, Enum):
    student = "student"
    coordinator = "coordinator"
    supervisor = "supervisor"
    admin = "admin"


class InternshipStatus(str, Enum):
    pending = "pending"
    active = "active"
    completed = "completed"
    terminated = "terminated"


class PlacementStatus(str, Enum):
    pending = "pending"
    confirmed = "confirmed"
    rejected = "rejected"
    completed = "completed"


class EvaluationStatus(str, Enum):
    draft = "draft"
    submitted = "submitted"
    reviewed = "reviewed"


class AttendanceStatus(str, Enum):
    present = "present"
    absent = "absent"
    leave = "leave"
    holiday = "holiday"


# ============================================================
# AUTH SCHEMAS
# ============================================================

class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8)
    name: str = Field(..., min_length=2, max_length=255)
    role: UserRole
    phone: Optional[str] = Field(None, max_length=20)

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: int
    role: str
    name: str

class UserResponse(BaseModel):
    user_id: int
    email: str
    name: str
    role: str
    phone: Optional[str] = None
    is_active: bool
    created_at: datetime


# ============================================================
# INTERNSHIP SCHEMAS
# ============================================================

class InternshipCreate(BaseModel):
    company_id: Optional[int] = None
    company: Optional[str] = Field(None, min_length=1, max_length=255, description="Company name")
    supervisor_id: Optional[int] = None
    supervisor: Optional[str] = Field(None, min_length=1, description="Supervisor name")
    position: str = Field(..., min_length=1, max_length=255)
    department: str = Field("General", max_length=100)
    start_date: date
    end_date: date
    status: InternshipStatus = InternshipStatus.pending
    description: Optional[str] = None
    responsibilities: List[str] = []
    requirements: List[str] = []
    student_ids: List[int] = []

    @model_validator(mode="after")
    def check_dates(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self

class InternshipUpdate(BaseModel):
    company: Optional[str] = Field(None, min_length=1, max_length=255)
    supervisor: Optional[str] = Field(None, min_length=1)
    position: Optional[str] = Field(None, min_length=1, max_length=255)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: Optional[InternshipStatus] = None
    description: Optional[str] = None
    student_ids: List[int] = []

class InternshipRow(BaseModel):
    id: int
    internship_code: str
    program_id: str
    student_id: int
    company_id: int
    company_name: str
    supervisor_id: int
    supervisor_name: str
    position: str
    department: str
    start_date: date
    end_date: date
    status: str
    description: Optional[str] = None

class InternshipCreateResponse(BaseModel):
    success: bool = True
    message: str
    program_id: str
    count: int
    internships: List[InternshipRow]

class InternshipUpdateResponse(BaseModel):
    success: bool = True
    message: str
    count: int
    added: int
    removed: int
    updated: int

class ProgramSummary(BaseModel):
    id: int
    program_id: str
    company: str
    position: str
    student_count: int
    status: str
    start_date: date
    end_date: date
    supervisor: str

class ProgramStudent(BaseModel):
    id: int
    name: str
    email: str
    progress: int
    hours_logged: int

class ProgramDetail(BaseModel):
    id: int
    program_id: str
    company: str
    position: str
    department: str
    student_count: int
    status: str
    start_date: date
    end_date: date
    supervisor: str
    supervisor_email: str
    supervisor_phone: str
    company_address: str
    description: str
    students: List[ProgramStudent]

class PlacementResponse(BaseModel):
    id: int
    student_name: str
    company: str
    position: str
    status: PlacementStatus
    start_date: date
    end_date: date

class PlacementStatusUpdate(BaseModel):
    status: PlacementStatus


# ============================================================
# EVALUATION SCHEMAS
# ============================================================

class EvaluationCategory(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    rating: int = Field(..., ge=1, le=5)
    weight: float = Field(..., ge=0, le=1)
    comments: Optional[str] = None


def _check_unique_names(categories: List[EvaluationCategory]) -> List[EvaluationCategory]:
    names = [c.name for c in categories]
    if len(names) != len(set(names)):
        raise ValueError("category names must be unique within an evaluation")
    return categories


class EvaluationCreate(BaseModel):
    internship_id: int
    categories: List[EvaluationCategory] = Field(..., min_length=1)
    feedback: str = Field(..., min_length=1)
    status: EvaluationStatus = EvaluationStatus.submitted

    @field_validator("categories")
    @classmethod
    def unique_category_names(cls, v):
        return _check_unique_names(v)

class EvaluationUpdate(BaseModel):
    categories: Optional[List[EvaluationCategory]] = Field(None, min_length=1)
    feedback: Optional[str] = Field(None, min_length=1)
    status: Optional[EvaluationStatus] = None

    @field_validator("categories")
    @classmethod
    def unique_category_names(cls, v):
        if v is None:
            return v
        return _check_unique_names(v)

class EvaluationResponse(BaseModel):
    id: int
    evaluation_code: str
    internship_id: int
    evaluator_id: int
    student_id: int
    student_name: str
    position: str
    company: str
    evaluation_date: datetime
    due_date: datetime
    status: str
    categories: List[EvaluationCategory]
    overall_rating: float
    feedback: str
    created_at: datetime
    updated_at: datetime

class EvaluationListItem(BaseModel):
    id: int
    student_name: str
    position: str
    due_date: datetime
    status: str
    rating: Optional[float] = None

class CategoryRating(BaseModel):
    name: str
    rating: int

class StudentEvaluationItem(BaseModel):
    id: int
    evaluator: str
    date: datetime
    status: str
    overall_rating: Optional[float] = None
    categories: List[CategoryRating] = []
    comments: str = ""

class InternResponse(BaseModel):
    id: int
    student_id: int
    name: str
    email: str
    company: str
    position: str
    start_date: date
    performance_rating: Optional[float] = None

class InternEvaluationItem(BaseModel):
    id: int
    evaluation_code: str
    status: str
    overall_rating: float
    feedback: str
    categories: List[EvaluationCategory]
    created_at: datetime


# ============================================================
# ATTENDANCE SCHEMAS
# ============================================================

class AttendanceMark(BaseModel):
    internship_id: int
    date: date
    status: AttendanceStatus
    check_in_time: Optional[str] = Field(None, pattern=r"^\d{2}:\d{2}$")
    check_out_time: Optional[str] = Field(None, pattern=r"^\d{2}:\d{2}$")
    notes: Optional[str] = None

class AttendanceRecordResponse(BaseModel):
    id: int
    record_code: str
    internship_id: int
    date: date
    status: str
    check_in_time: Optional[str] = None
    check_out_time: Optional[str] = None
    notes: Optional[str] = None
    marked_by: int

class AttendanceCounts(BaseModel):
    present: int = 0
    absent: int = 0
    leave: int = 0

class WeeklyAttendance(BaseModel):
    week: str
    present: int
    absent: int
    leave: int

class StudentAttendanceResponse(BaseModel):
    attendance_summary: AttendanceCounts
    weekly_attendance: List[WeeklyAttendance]
    attendance_percentage: float


# ============================================================
# COORDINATOR SCHEMAS
# ============================================================

class DashboardResponse(BaseModel):
    total_students: int
    new_students_this_semester: int
    active_internships: int
    placement_rate: int
    completed_this_semester: int
    average_rating: Optional[float] = None

class SemesterCount(BaseModel):
    semester: str
    internships: int

class CompanyPlacements(BaseModel):
    company: str
    placements: int

class CompanyScore(BaseModel):
    company: str
    average_score: float
    evaluation_count: int

class ActiveVsCompleted(BaseModel):
    active: int
    completed: int

class AnalyticsResponse(BaseModel):
    internship_growth: List[SemesterCount]
    placement_success_rate: int
    evaluation_completion_rate: int
    placements_per_company: List[CompanyPlacements]
    evaluation_scores_by_company: List[CompanyScore]
    active_vs_completed: ActiveVsCompleted

class StudentSummary(BaseModel):
    id: int
    name: str
    email: str
    phone: str
    internship: Optional[str] = None
    status: str
    start_date: Optional[date] = None

class StudentProfile(BaseModel):
    id: int
    name: str
    email: str
    phone: str = ""
    created_at: datetime
    updated_at: datetime

class StudentInternship(BaseModel):
    id: int
    company_name: str
    position: str
    department: str
    start_date: date
    end_date: date
    status: str
    supervisor_id: int
    supervisor_name: str

class StudentEvaluationSummary(BaseModel):
    id: int
    evaluation_code: str
    date: datetime
    overall_rating: float
    status: str
    feedback: str

class StudentDetail(BaseModel):
    student: StudentProfile
    internship: Optional[StudentInternship] = None
    evaluations: List[StudentEvaluationSummary]
    total_evaluations: int


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(BaseModel):
    message: str
    success: bool = True
