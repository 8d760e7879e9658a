from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, field_validator


class AttendanceEntry(BaseModel):
    user_id: int
    present: bool


class AttendanceSubmit(BaseModel):
    date: date
    attendances: list[AttendanceEntry]

    @field_validator("date", mode="before")
    @classmethod
    def _calendar_day(cls, v):
        # a full timestamp is accepted; only its calendar day is kept
        if isinstance(v, datetime):
            return v.date()
        if isinstance(v, str) and "T" in v:
            return datetime.fromisoformat(v.replace("Z", "+00:00")).date()
        return v


class AttendanceUser(BaseModel):
    id: int
    name: str
    email: str
    photo_url: Optional[str] = None

    class Config:
        from_attributes = True


class AttendanceRead(BaseModel):
    id: int
    user_id: int
    course_id: str
    date: date
    present: bool
    user: AttendanceUser

    class Config:
        from_attributes = True


class AttendanceStudent(BaseModel):
    user_id: int
    google_id: str
    name: str
    email: str
    photo_url: Optional[str] = None
    present: bool = False


class AttendancePrepared(BaseModel):
    date: date
    students: list[AttendanceStudent]
    has_existing_attendance: bool


class AttendanceSaved(BaseModel):
    saved: int
    date: date
    records: list[AttendanceRead]


class AttendanceSummary(BaseModel):
    total: int
    present: int
    absent: int


class AttendanceByDate(BaseModel):
    date: date
    attendances: list[AttendanceRead]
    summary: AttendanceSummary


class AttendanceOverall(BaseModel):
    total_records: int
    present_count: int
    absent_count: int
    attendance_rate: float


class StudentAttendanceStats(BaseModel):
    user: AttendanceUser
    total: int
    present: int
    absent: int
    rate: float


class AttendanceStats(BaseModel):
    overall: AttendanceOverall
    by_student: list[StudentAttendanceStats]
