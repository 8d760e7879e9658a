import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from classroom_dashboard.core.deps import get_classroom_client, get_db
from classroom_dashboard.core.permissions import require_course_teacher
from classroom_dashboard.schemas.attendance import (
    AttendanceByDate,
    AttendancePrepared,
    AttendanceSaved,
    AttendanceStats,
    AttendanceStudent,
    AttendanceSubmit,
    AttendanceSummary,
)
from classroom_dashboard.schemas.auth import SessionUser
from classroom_dashboard.services import attendance as attendance_service
from classroom_dashboard.services.classroom import get_course_students
from classroom_dashboard.services.classroom_client import ClassroomClient

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/{course_id}/attendance/prepare", response_model=AttendancePrepared)
def prepare_attendance(
    course_id: str,
    day: Optional[date] = None,
    db: Session = Depends(get_db),
    client: ClassroomClient = Depends(get_classroom_client),
    teacher: SessionUser = Depends(require_course_teacher),
):
    day = day or date.today()

    students = get_course_students(client, course_id)
    users = attendance_service.ensure_users_exist(db, students)
    logger.info("Ensured %d users exist for course %s", len(users), course_id)

    existing = attendance_service.get_attendance_for_date(db, course_id, day)
    present_by_user = {a.user_id: a.present for a in existing}

    return AttendancePrepared(
        date=day,
        students=[
            AttendanceStudent(
                user_id=u.id,
                google_id=u.google_id,
                name=u.name,
                email=u.email,
                photo_url=u.photo_url,
                present=present_by_user.get(u.id, False),
            )
            for u in users
        ],
        has_existing_attendance=len(existing) > 0,
    )


@router.post(
    "/{course_id}/attendance",
    response_model=AttendanceSaved,
    status_code=status.HTTP_201_CREATED,
)
def submit_attendance(
    course_id: str,
    payload: AttendanceSubmit,
    db: Session = Depends(get_db),
    teacher: SessionUser = Depends(require_course_teacher),
):
    try:
        records = attendance_service.save_attendances(
            db, course_id, payload.date, payload.attendances
        )
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))

    logger.info("Saved %d attendance records for course %s on %s", len(records), course_id, payload.date)
    return {"saved": len(records), "date": payload.date, "records": records}


@router.get("/{course_id}/attendance/stats", response_model=AttendanceStats)
def attendance_stats(
    course_id: str,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db),
    teacher: SessionUser = Depends(require_course_teacher),
):
    if start_date and end_date and start_date > end_date:
        raise HTTPException(status_code=400, detail="start_date must not be after end_date")
    return attendance_service.get_attendance_stats(db, course_id, start_date, end_date)


@router.get("/{course_id}/attendance/dates", response_model=list[date])
def attendance_dates(
    course_id: str,
    db: Session = Depends(get_db),
    teacher: SessionUser = Depends(require_course_teacher),
):
    return attendance_service.get_attendance_dates(db, course_id)


@router.get("/{course_id}/attendance/{day}", response_model=AttendanceByDate)
def attendance_by_date(
    course_id: str,
    day: date,
    db: Session = Depends(get_db),
    teacher: SessionUser = Depends(require_course_teacher),
):
    records = attendance_service.get_attendance_for_date(db, course_id, day)
    present = sum(1 for r in records if r.present)
    return {
        "date": day,
        "attendances": records,
        "summary": AttendanceSummary(
            total=len(records), present=present, absent=len(records) - present
        ),
    }
