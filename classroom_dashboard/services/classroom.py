import logging
from typing import Callable, Optional

from classroom_dashboard.schemas.classroom import (
    Announcement,
    ClassroomCourses,
    Course,
    CourseDetails,
    CourseWork,
    Student,
    StudentSubmission,
    Teacher,
    UserCourseRole,
)
from classroom_dashboard.services.classroom_client import ClassroomAPIError, ClassroomClient

logger = logging.getLogger(__name__)

TEACHER = "TEACHER"
STUDENT = "STUDENT"


def _optional(fetch: Callable[[], list[dict]], what: str, course_id: str) -> list[dict]:
    """Run a fetch the user may lack permission for; failures become []."""
    try:
        return fetch()
    except ClassroomAPIError as e:
        logger.warning("No access to %s for course %s: %s", what, course_id, e.message)
        return []


def get_classroom_courses(client: ClassroomClient) -> ClassroomCourses:
    """Active courses the user teaches or attends, one role per course (TEACHER wins)."""
    try:
        teacher_courses = client.list_courses(teacher_id="me")
        student_courses = client.list_courses(student_id="me")
    except ClassroomAPIError as e:
        logger.error("Error fetching classroom courses: %s", e.message)
        raise

    courses: dict[str, Course] = {}
    roles: dict[str, set[str]] = {}
    for role, raw_courses in ((TEACHER, teacher_courses), (STUDENT, student_courses)):
        for raw in raw_courses:
            course = Course.model_validate(raw)
            if not course.id:
                continue
            courses[course.id] = course
            roles.setdefault(course.id, set()).add(role)

    user_roles = [
        UserCourseRole(course_id=course_id, role=TEACHER if TEACHER in r else STUDENT)
        for course_id, r in roles.items()
    ]
    return ClassroomCourses(courses=list(courses.values()), user_roles=user_roles)


def get_user_roles(client: ClassroomClient) -> dict[str, str]:
    return {r.course_id: r.role for r in get_classroom_courses(client).user_roles}


def _coursework_via_submissions(client: ClassroomClient, course_id: str) -> list[dict]:
    """
    Students may not list coursework directly; resolve it through their own
    submissions, falling back to the plain listing.
    """
    try:
        own = client.list_submissions(course_id, user_id="me")
    except ClassroomAPIError as e:
        logger.warning(
            "No access to own submissions for course %s: %s", course_id, e.message
        )
        return _optional(lambda: client.list_coursework(course_id), "coursework", course_id)

    found: dict[str, dict] = {}
    for s in own:
        work_id = s.get("courseWorkId")
        if not work_id or work_id in found:
            continue
        try:
            found[work_id] = client.get_coursework(course_id, work_id)
        except ClassroomAPIError as e:
            logger.warning("Could not get coursework %s: %s", work_id, e.message)
    return list(found.values())


def get_course_details(
    client: ClassroomClient,
    course_id: str,
    role: Optional[str] = None,
) -> CourseDetails:
    # the course itself is required; everything else degrades to []
    course = Course.model_validate(client.get_course(course_id))

    students = _optional(lambda: client.list_students(course_id), "students", course_id)
    teachers = _optional(lambda: client.list_teachers(course_id), "teachers", course_id)

    if role == STUDENT:
        coursework = _coursework_via_submissions(client, course_id)
    else:
        coursework = _optional(
            lambda: client.list_coursework(course_id), "coursework", course_id
        )

    announcements = _optional(
        lambda: client.list_announcements(course_id), "announcements", course_id
    )

    return CourseDetails(
        course=course,
        students=[Student.model_validate(s) for s in students],
        teachers=[Teacher.model_validate(t) for t in teachers],
        coursework=[CourseWork.model_validate(w) for w in coursework],
        announcements=[Announcement.model_validate(a) for a in announcements],
    )


def get_course_students(client: ClassroomClient, course_id: str) -> list[Student]:
    students = [Student.model_validate(s) for s in client.list_students(course_id)]
    logger.info("Retrieved %d students for course %s", len(students), course_id)
    return students


def get_course_submissions(
    client: ClassroomClient,
    course_id: str,
    coursework: Optional[list[CourseWork]] = None,
) -> list[StudentSubmission]:
    """
    All submissions of a course, fetched coursework by coursework.

    Pass the coursework already loaded with the course details so the
    submissions match that snapshot; without it the coursework is listed here.
    """
    if coursework is None:
        coursework = [CourseWork.model_validate(w) for w in client.list_coursework(course_id)]

    submissions: list[StudentSubmission] = []
    for work in coursework:
        work_id = work.id
        if not work_id:
            continue
        raw = _optional(
            lambda: client.list_submissions(course_id, work_id),
            f"submissions of coursework {work_id}",
            course_id,
        )
        submissions.extend(StudentSubmission.model_validate(s) for s in raw)
    return submissions


def get_my_submissions(client: ClassroomClient, course_id: str) -> list[StudentSubmission]:
    raw = client.list_submissions(course_id, user_id="me")
    return [StudentSubmission.model_validate(s) for s in raw]
