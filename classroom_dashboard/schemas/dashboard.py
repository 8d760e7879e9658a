from typing import Optional

from pydantic import BaseModel

from classroom_dashboard.schemas.submission_report import SubmissionStats


class CourseSummary(BaseModel):
    course_id: str
    course_name: str
    section: Optional[str] = None
    owner_id: Optional[str] = None
    role: str  # "TEACHER" | "STUDENT"
    student_count: int
    teacher_count: int
    coursework_count: int
    announcement_count: int
    stats: SubmissionStats
    error: Optional[str] = None  # set when stats fell back to zeros


class DashboardRead(BaseModel):
    owner: list[CourseSummary] = []
    teacher: list[CourseSummary] = []
    student: list[CourseSummary] = []
    failed_course_ids: list[str] = []
