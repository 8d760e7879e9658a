import logging
from datetime import date, datetime
from typing import Iterable, Optional

from sqlalchemy.orm import Session, joinedload

from classroom_dashboard.models.attendance import Attendance
from classroom_dashboard.models.user import User
from classroom_dashboard.schemas.attendance import (
    AttendanceEntry,
    AttendanceOverall,
    AttendanceStats,
    AttendanceUser,
    StudentAttendanceStats,
)
from classroom_dashboard.schemas.classroom import Student

logger = logging.getLogger(__name__)


def normalize_date(value: date | datetime) -> date:
    """Attendance is per calendar day; drop any time part."""
    if isinstance(value, datetime):
        return value.date()
    return value


def _rate(present: int, total: int) -> float:
    return round(present / total * 100, 2) if total > 0 else 0.0


def upsert_user(db: Session, student: Student) -> User:
    """Create or refresh the local user row for a roster member (no commit)."""
    if not student.user_id or not student.email or not student.full_name:
        raise ValueError(f"Incomplete student record: {student.user_id!r}")

    user = db.query(User).filter(User.google_id == student.user_id).first()
    if user is None:
        user = User(google_id=student.user_id)
        db.add(user)

    user.name = student.full_name
    user.email = student.email
    user.photo_url = student.photo_url
    db.flush()
    return user


def ensure_users_exist(db: Session, students: Iterable[Student]) -> list[User]:
    users: list[User] = []
    for student in students:
        try:
            users.append(upsert_user(db, student))
        except ValueError as e:
            logger.error("Skipping student %s: %s", student.user_id, e)

    try:
        db.commit()
    except Exception:
        db.rollback()
        raise

    return users


def get_attendance_for_date(db: Session, course_id: str, day: date | datetime) -> list[Attendance]:
    return (
        db.query(Attendance)
        .options(joinedload(Attendance.user))
        .filter(Attendance.course_id == course_id, Attendance.date == normalize_date(day))
        .order_by(Attendance.id.asc())
        .all()
    )


def save_attendances(
    db: Session,
    course_id: str,
    day: date | datetime,
    entries: list[AttendanceEntry],
) -> list[Attendance]:
    """Upsert one row per (user, course, day); raises LookupError for unknown users."""
    day = normalize_date(day)

    # repeated user ids in one request: the last entry wins
    latest = {e.user_id: e.present for e in entries}

    known = {uid for (uid,) in db.query(User.id).filter(User.id.in_(list(latest))).all()}
    missing = sorted(set(latest) - known)
    if missing:
        raise LookupError(f"Unknown user ids: {missing}")

    records: list[Attendance] = []
    for user_id, present in latest.items():
        record = (
            db.query(Attendance)
            .filter(
                Attendance.user_id == user_id,
                Attendance.course_id == course_id,
                Attendance.date == day,
            )
            .first()
        )
        if record is None:
            record = Attendance(user_id=user_id, course_id=course_id, date=day)
            db.add(record)
        record.present = present
        records.append(record)

    try:
        db.commit()
    except Exception:
        db.rollback()
        raise

    for record in records:
        db.refresh(record)
    return records


def get_attendance_stats(
    db: Session,
    course_id: str,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> AttendanceStats:
    q = (
        db.query(Attendance)
        .options(joinedload(Attendance.user))
        .filter(Attendance.course_id == course_id)
    )
    if start_date is not None:
        q = q.filter(Attendance.date >= start_date)
    if end_date is not None:
        q = q.filter(Attendance.date <= end_date)
    records = q.order_by(Attendance.id.asc()).all()

    total = len(records)
    present = sum(1 for r in records if r.present)

    per_user: dict[int, dict] = {}
    for r in records:
        row = per_user.setdefault(r.user_id, {"user": r.user, "total": 0, "present": 0})
        row["total"] += 1
        if r.present:
            row["present"] += 1

    by_student = [
        StudentAttendanceStats(
            user=AttendanceUser.model_validate(row["user"]),
            total=row["total"],
            present=row["present"],
            absent=row["total"] - row["present"],
            rate=_rate(row["present"], row["total"]),
        )
        for row in per_user.values()
    ]

    return AttendanceStats(
        overall=AttendanceOverall(
            total_records=total,
            present_count=present,
            absent_count=total - present,
            attendance_rate=_rate(present, total),
        ),
        by_student=by_student,
    )


def get_attendance_dates(db: Session, course_id: str) -> list[date]:
    rows = (
        db.query(Attendance.date)
        .filter(Attendance.course_id == course_id)
        .distinct()
        .order_by(Attendance.date.desc())
        .all()
    )
    return [d for (d,) in rows]
