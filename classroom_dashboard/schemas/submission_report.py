from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class SubmissionStatus(str, Enum):
    ON_TIME = "ON_TIME"
    LATE = "LATE"
    RESUBMITTED = "RESUBMITTED"
    NOT_SUBMITTED = "NOT_SUBMITTED"
    PENDING = "PENDING"


class SubmissionCell(BaseModel):
    status: SubmissionStatus
    submitted_at: Optional[datetime] = None
    due_date: Optional[datetime] = None
    grade: Optional[float] = None
    max_points: Optional[float] = None


class StudentSubmissionRow(BaseModel):
    student_id: str
    student_name: str
    student_email: str
    submissions: dict[str, SubmissionCell] = {}


class AssignmentMeta(BaseModel):
    id: str
    title: str
    due_date: Optional[datetime] = None
    max_points: Optional[float] = None


class SubmissionStats(BaseModel):
    on_time: int = 0
    late: int = 0
    resubmitted: int = 0
    not_submitted: int = 0
    pending: int = 0  # not part of the four headline counters
    total: int = 0


class SubmissionReport(BaseModel):
    students: list[StudentSubmissionRow] = []
    assignments: list[AssignmentMeta] = []
    stats: SubmissionStats = Field(default_factory=SubmissionStats)
