import logging
from typing import Any, Optional

import httpx

from classroom_dashboard.core.config import CLASSROOM_API_BASE_URL, CLASSROOM_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)


class ClassroomAPIError(Exception):
    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class ClassroomClient:
    """
    Thin wrapper over the Classroom REST API using the user's provider token.

    Returns raw JSON dicts; callers validate them into schemas.
    """

    def __init__(
        self,
        access_token: str,
        base_url: str = CLASSROOM_API_BASE_URL,
        timeout: float = CLASSROOM_TIMEOUT_SECONDS,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self._http = httpx.Client(
            base_url=base_url,
            headers={"Authorization": f"Bearer {access_token}"},
            timeout=timeout,
            transport=transport,
        )

    def close(self) -> None:
        self._http.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def _get(self, path: str, params: Optional[dict] = None) -> dict[str, Any]:
        try:
            r = self._http.get(path, params=params)
        except httpx.HTTPError as e:
            raise ClassroomAPIError(502, f"GET {path} failed: {e}") from e

        if r.status_code >= 400:
            raise ClassroomAPIError(r.status_code, f"GET {path} -> {r.status_code}")
        try:
            return r.json()
        except ValueError as e:
            raise ClassroomAPIError(502, f"GET {path} returned invalid JSON") from e

    def _list(self, path: str, key: str, params: Optional[dict] = None) -> list[dict[str, Any]]:
        """Collect every page of a list endpoint."""
        params = dict(params or {})
        items: list[dict[str, Any]] = []
        while True:
            body = self._get(path, params=params)
            items.extend(body.get(key) or [])
            token = body.get("nextPageToken")
            if not token:
                return items
            params["pageToken"] = token

    # courses
    def list_courses(
        self,
        teacher_id: Optional[str] = None,
        student_id: Optional[str] = None,
        course_states: tuple[str, ...] = ("ACTIVE",),
    ) -> list[dict[str, Any]]:
        params: dict[str, Any] = {"courseStates": list(course_states)}
        if teacher_id:
            params["teacherId"] = teacher_id
        if student_id:
            params["studentId"] = student_id
        return self._list("/courses", "courses", params)

    def get_course(self, course_id: str) -> dict[str, Any]:
        return self._get(f"/courses/{course_id}")

    # roster
    def list_students(self, course_id: str) -> list[dict[str, Any]]:
        return self._list(f"/courses/{course_id}/students", "students")

    def list_teachers(self, course_id: str) -> list[dict[str, Any]]:
        return self._list(f"/courses/{course_id}/teachers", "teachers")

    # coursework
    def list_coursework(self, course_id: str) -> list[dict[str, Any]]:
        return self._list(f"/courses/{course_id}/courseWork", "courseWork")

    def get_coursework(self, course_id: str, coursework_id: str) -> dict[str, Any]:
        return self._get(f"/courses/{course_id}/courseWork/{coursework_id}")

    def list_submissions(
        self,
        course_id: str,
        coursework_id: str = "-",
        user_id: Optional[str] = None,
    ) -> list[dict[str, Any]]:
        params = {"userId": user_id} if user_id else None
        return self._list(
            f"/courses/{course_id}/courseWork/{coursework_id}/studentSubmissions",
            "studentSubmissions",
            params,
        )

    def list_announcements(self, course_id: str) -> list[dict[str, Any]]:
        return self._list(f"/courses/{course_id}/announcements", "announcements")
