from typing import Optional

from fastapi import APIRouter, Depends, Query

from classroom_dashboard.core.config import DUE_DATE_TIMEZONE
from classroom_dashboard.core.deps import get_classroom_client
from classroom_dashboard.schemas.classroom import ClassroomCourses, CourseDetails
from classroom_dashboard.schemas.submission_report import SubmissionReport, SubmissionStats
from classroom_dashboard.services.classroom import (
    get_classroom_courses,
    get_course_details,
    get_course_submissions,
)
from classroom_dashboard.services.classroom_client import ClassroomClient
from classroom_dashboard.services.submissions import (
    calculate_course_stats,
    process_submission_data,
    resolve_timezone,
)

router = APIRouter()


def _course_report(client: ClassroomClient, course_id: str) -> SubmissionReport:
    details = get_course_details(client, course_id)
    submissions = get_course_submissions(client, course_id, details.coursework)
    return process_submission_data(
        details.students,
        details.coursework,
        submissions,
        tz=resolve_timezone(DUE_DATE_TIMEZONE),
    )


@router.get("", response_model=ClassroomCourses)
def list_my_courses(client: ClassroomClient = Depends(get_classroom_client)):
    return get_classroom_courses(client)


@router.get("/{course_id}", response_model=CourseDetails)
def course_details(
    course_id: str,
    role: Optional[str] = Query(default=None, pattern="^(TEACHER|STUDENT)$"),
    client: ClassroomClient = Depends(get_classroom_client),
):
    return get_course_details(client, course_id, role)


@router.get("/{course_id}/submissions", response_model=SubmissionReport)
def course_submissions(
    course_id: str,
    client: ClassroomClient = Depends(get_classroom_client),
):
    return _course_report(client, course_id)


@router.get("/{course_id}/submissions/stats", response_model=SubmissionStats)
def course_submission_stats(
    course_id: str,
    client: ClassroomClient = Depends(get_classroom_client),
):
    details = get_course_details(client, course_id)
    submissions = get_course_submissions(client, course_id, details.coursework)
    return calculate_course_stats(
        details.students,
        details.coursework,
        submissions,
        tz=resolve_timezone(DUE_DATE_TIMEZONE),
    )
