import logging
from datetime import tzinfo
from typing import Optional

from classroom_dashboard.schemas.auth import SessionUser
from classroom_dashboard.schemas.classroom import Name, Student, UserProfile
from classroom_dashboard.schemas.dashboard import CourseSummary, DashboardRead
from classroom_dashboard.schemas.submission_report import SubmissionStats
from classroom_dashboard.services.classroom import (
    STUDENT,
    TEACHER,
    get_course_details,
    get_course_submissions,
    get_my_submissions,
    get_user_roles,
)
from classroom_dashboard.services.classroom_client import ClassroomAPIError, ClassroomClient
from classroom_dashboard.services.submissions import calculate_course_stats

logger = logging.getLogger(__name__)

STATS_UNAVAILABLE = "Submission statistics are unavailable for this course"


def view_for(owner_id: Optional[str], role: str, google_id: str) -> str:
    """owner > teacher > student; an owner never shows up as a plain teacher."""
    if owner_id and owner_id == google_id:
        return "owner"
    if role == TEACHER:
        return "teacher"
    return "student"


def _self_as_student(details_students: list[Student], me: SessionUser) -> list[Student]:
    for s in details_students:
        if s.user_id == me.google_id:
            return [s]
    return [
        Student(
            user_id=me.google_id,
            profile=UserProfile(name=Name(full_name=me.name), email_address=me.email),
        )
    ]


def summarize_course(
    client: ClassroomClient,
    course_id: str,
    role: str,
    me: SessionUser,
    tz: Optional[tzinfo] = None,
) -> CourseSummary:
    details = get_course_details(client, course_id, role)

    # error boundary: a failure here must not take down the whole dashboard
    error = None
    try:
        if role == STUDENT:
            students = _self_as_student(details.students, me)
            submissions = get_my_submissions(client, course_id)
        else:
            students = details.students
            submissions = get_course_submissions(client, course_id, details.coursework)
        stats = calculate_course_stats(students, details.coursework, submissions, tz)
    except Exception:
        logger.exception("Error computing submission stats for course %s", course_id)
        stats = SubmissionStats()
        error = STATS_UNAVAILABLE

    return CourseSummary(
        course_id=course_id,
        course_name=details.course.name or "",
        section=details.course.section,
        owner_id=details.course.owner_id,
        role=role,
        student_count=len(details.students),
        teacher_count=len(details.teachers),
        coursework_count=len(details.coursework),
        announcement_count=len(details.announcements),
        stats=stats,
        error=error,
    )


def build_dashboard(
    client: ClassroomClient,
    course_ids: list[str],
    me: SessionUser,
    tz: Optional[tzinfo] = None,
) -> DashboardRead:
    roles = get_user_roles(client)
    dashboard = DashboardRead()

    for course_id in course_ids:
        role = roles.get(course_id, STUDENT)
        try:
            summary = summarize_course(client, course_id, role, me, tz)
        except ClassroomAPIError as e:
            logger.error("Failed to load course details for %s: %s", course_id, e.message)
            dashboard.failed_course_ids.append(course_id)
            continue

        getattr(dashboard, view_for(summary.owner_id, role, me.google_id)).append(summary)

    return dashboard
