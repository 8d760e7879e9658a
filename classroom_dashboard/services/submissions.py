"""
Submission status reconciliation.

Given a course roster, its coursework and the raw student submissions from
the classroom platform, classify every (student, assignment) pair and roll
the classifications up into course totals. Everything here is pure: no I/O,
no shared state.
"""
import logging
from collections import Counter
from datetime import datetime, timezone, tzinfo
from typing import Iterable, Optional
from zoneinfo import ZoneInfo

from classroom_dashboard.core.config import DEFAULT_ASSIGNMENT_TITLE, DEFAULT_STUDENT_NAME
from classroom_dashboard.schemas.classroom import (
    ClassroomDate,
    CourseWork,
    StateHistory,
    Student,
    StudentSubmission,
    TimeOfDay,
)
from classroom_dashboard.schemas.submission_report import (
    AssignmentMeta,
    StudentSubmissionRow,
    SubmissionCell,
    SubmissionReport,
    SubmissionStats,
    SubmissionStatus,
)

logger = logging.getLogger(__name__)

TURNED_IN = "TURNED_IN"
NOT_STARTED_STATES = frozenset({"CREATED", "NEW"})

# counters reported per status; PENDING has its own slot outside the headline four
_STATS_FIELDS = {
    SubmissionStatus.ON_TIME: "on_time",
    SubmissionStatus.LATE: "late",
    SubmissionStatus.RESUBMITTED: "resubmitted",
    SubmissionStatus.NOT_SUBMITTED: "not_submitted",
    SubmissionStatus.PENDING: "pending",
}


def resolve_timezone(name: Optional[str]) -> Optional[tzinfo]:
    """Map a configured zone name to a tzinfo; "local" (or empty) means None."""
    if not name or name.lower() == "local":
        return None
    return ZoneInfo(name)


def _or_default(value: Optional[int], default: int) -> int:
    return default if value is None else value


def resolve_due_date(
    due_date: Optional[ClassroomDate],
    due_time: Optional[TimeOfDay] = None,
    tz: Optional[tzinfo] = None,
) -> Optional[datetime]:
    """
    Turn the platform's partial due date into an aware datetime.

    - missing date (or a zero year/month/day) -> None, meaning no deadline
    - no time of day -> 23:59:59.999 on that day
    - time of day with gaps -> hours 23, minutes 59, seconds 59
    - tz None -> the server's local zone
    """
    if due_date is None or not due_date.year or not due_date.month or not due_date.day:
        return None

    if due_time is None:
        clock = (23, 59, 59, 999000)
    else:
        clock = (
            _or_default(due_time.hours, 23),
            _or_default(due_time.minutes, 59),
            _or_default(due_time.seconds, 59),
            0,
        )

    try:
        naive = datetime(due_date.year, due_date.month, due_date.day, *clock)
        if tz is None:
            return naive.astimezone()
        return naive.replace(tzinfo=tz)
    except (ValueError, OverflowError, OSError):
        return None


def _as_aware(ts: datetime) -> datetime:
    # platform timestamps are UTC; treat naive values the same way
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts


def _turn_ins(submission: StudentSubmission) -> list[StateHistory]:
    """TURNED_IN transitions in history order (position, not timestamp)."""
    return [
        h.state_history
        for h in submission.submission_history
        if h.state_history is not None and h.state_history.state == TURNED_IN
    ]


def first_turn_in_at(submission: Optional[StudentSubmission]) -> Optional[datetime]:
    if submission is None:
        return None
    turn_ins = _turn_ins(submission)
    if not turn_ins or turn_ins[0].state_timestamp is None:
        return None
    return _as_aware(turn_ins[0].state_timestamp)


def get_submission_status(
    submission: Optional[StudentSubmission],
    coursework: Optional[CourseWork],
    tz: Optional[tzinfo] = None,
) -> SubmissionStatus:
    """
    Classify one submission against its coursework. Guards run in order and
    the first match wins; resubmission outranks the on-time/late comparison.
    """
    # 1. never opened
    if submission is None:
        return SubmissionStatus.NOT_SUBMITTED

    # 2. no history: only the current state tells us anything
    if not submission.submission_history:
        if submission.state in NOT_STARTED_STATES:
            return SubmissionStatus.NOT_SUBMITTED
        return SubmissionStatus.PENDING

    # 3. no usable first turn-in
    turn_ins = _turn_ins(submission)
    if not turn_ins or turn_ins[0].state_timestamp is None:
        return SubmissionStatus.NOT_SUBMITTED

    # 4. turned in more than once, timestamps or not
    if len(turn_ins) > 1:
        return SubmissionStatus.RESUBMITTED

    # 5. compare the first turn-in with the deadline
    due = None
    if coursework is not None:
        due = resolve_due_date(coursework.due_date, coursework.due_time, tz)
    if due is None:
        return SubmissionStatus.ON_TIME

    if _as_aware(turn_ins[0].state_timestamp) <= due:
        return SubmissionStatus.ON_TIME
    return SubmissionStatus.LATE


def count_statuses(statuses: Iterable[SubmissionStatus], total: int) -> SubmissionStats:
    counts = Counter(statuses)
    return SubmissionStats(
        total=total,
        **{field: counts.get(status, 0) for status, field in _STATS_FIELDS.items()},
    )


def _index_submissions(
    submissions: Iterable[StudentSubmission],
) -> dict[tuple[str, str], StudentSubmission]:
    index: dict[tuple[str, str], StudentSubmission] = {}
    for s in submissions:
        if not s.user_id or not s.course_work_id:
            continue
        # last write wins on duplicate keys
        index[(s.user_id, s.course_work_id)] = s
    return index


def process_submission_data(
    students: list[Student],
    coursework: list[CourseWork],
    submissions: list[StudentSubmission],
    tz: Optional[tzinfo] = None,
) -> SubmissionReport:
    """
    Build the student x assignment matrix for one course.

    Rows follow the order of ``students`` and each row's cells follow the
    order of ``coursework``. ``stats.total`` is always
    ``len(students) * len(coursework)``.
    """
    if not students or not coursework:
        return SubmissionReport()

    index = _index_submissions(submissions)

    # cells are keyed by coursework id; a repeated id keeps only its last cell per row
    repeated = sorted(k for k, n in Counter(w.id or "" for w in coursework).items() if n > 1)
    if repeated:
        logger.warning(
            "coursework ids %s repeat; rows keep one cell per id while stats count every item",
            repeated,
        )

    due_dates = [resolve_due_date(w.due_date, w.due_time, tz) for w in coursework]

    assignments = [
        AssignmentMeta(
            id=work.id or "",
            title=work.title or DEFAULT_ASSIGNMENT_TITLE,
            due_date=due,
            max_points=work.max_points,
        )
        for work, due in zip(coursework, due_dates)
    ]

    rows: list[StudentSubmissionRow] = []
    statuses: list[SubmissionStatus] = []

    for student in students:
        student_id = student.user_id or ""
        cells: dict[str, SubmissionCell] = {}

        for work, due in zip(coursework, due_dates):
            submission = index.get((student_id, work.id or ""))
            status = get_submission_status(submission, work, tz)
            statuses.append(status)

            cells[work.id or ""] = SubmissionCell(
                status=status,
                submitted_at=first_turn_in_at(submission),
                due_date=due,
                grade=submission.assigned_grade if submission else None,
                max_points=work.max_points,
            )

        rows.append(
            StudentSubmissionRow(
                student_id=student_id,
                student_name=student.full_name or DEFAULT_STUDENT_NAME,
                student_email=student.email or "",
                submissions=cells,
            )
        )

    stats = count_statuses(statuses, total=len(students) * len(coursework))
    logger.debug(
        "classified %d cells (%d students x %d assignments)",
        len(statuses),
        len(students),
        len(coursework),
    )
    return SubmissionReport(students=rows, assignments=assignments, stats=stats)


def calculate_course_stats(
    students: list[Student],
    coursework: list[CourseWork],
    submissions: list[StudentSubmission],
    tz: Optional[tzinfo] = None,
) -> SubmissionStats:
    return process_submission_data(students, coursework, submissions, tz).stats
