"""Shared test doubles: an in-memory Classroom API and session helpers."""
import re

import httpx

from classroom_dashboard.services.classroom_client import ClassroomClient

TEST_API_BASE = "https://classroom.test/v1"

TEACHER_GOOGLE_ID = "t-100"
STUDENT_GOOGLE_ID = "s-1"


class FakeClassroom:
    """In-memory stand-in for the Classroom REST API, served via httpx.MockTransport."""

    def __init__(self):
        self.teacher_courses: list[dict] = []
        self.student_courses: list[dict] = []
        self.courses: dict[str, dict] = {}
        self.students: dict[str, list[dict]] = {}
        self.teachers: dict[str, list[dict]] = {}
        self.coursework: dict[str, list[dict]] = {}
        self.submissions: dict[str, list[dict]] = {}
        self.announcements: dict[str, list[dict]] = {}
        # (course_id, kind) pairs answered with 403; kind is the list name
        # ("students", "courseWork", "studentSubmissions"), "courseWork/item" or "course"
        self.forbidden: set[tuple[str, str]] = set()
        self.page_size: int | None = None
        self.requests: list[httpx.Request] = []
        # the google id the provider token belongs to
        self.me = TEACHER_GOOGLE_ID

    def _page(self, key: str, items: list[dict], request: httpx.Request) -> httpx.Response:
        if self.page_size is None:
            return httpx.Response(200, json={key: items})
        start = int(request.url.params.get("pageToken", "0"))
        body = {key: items[start:start + self.page_size]}
        if start + self.page_size < len(items):
            body["nextPageToken"] = str(start + self.page_size)
        return httpx.Response(200, json=body)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix("/v1")
        params = request.url.params

        if path == "/courses":
            if params.get("teacherId") == "me":
                return self._page("courses", self.teacher_courses, request)
            return self._page("courses", self.student_courses, request)

        m = re.fullmatch(r"/courses/([^/]+)(?:/(\w+))?(?:/([^/]+))?(?:/(\w+))?", path)
        if not m:
            return httpx.Response(404, json={"error": "not found"})
        course_id, resource, item_id, sub_resource = m.groups()

        if course_id not in self.courses:
            return httpx.Response(404, json={"error": "course not found"})
        kind = sub_resource or (resource if item_id is None else f"{resource}/item") or "course"
        if (course_id, kind) in self.forbidden:
            return httpx.Response(403, json={"error": "forbidden"})

        if resource is None:
            return httpx.Response(200, json=self.courses[course_id])
        if resource == "students":
            return self._page("students", self.students.get(course_id, []), request)
        if resource == "teachers":
            return self._page("teachers", self.teachers.get(course_id, []), request)
        if resource == "announcements":
            return self._page("announcements", self.announcements.get(course_id, []), request)
        if resource == "courseWork" and item_id is None:
            return self._page("courseWork", self.coursework.get(course_id, []), request)
        if resource == "courseWork" and sub_resource is None:
            for w in self.coursework.get(course_id, []):
                if w.get("id") == item_id:
                    return httpx.Response(200, json=w)
            return httpx.Response(404, json={"error": "coursework not found"})
        if sub_resource == "studentSubmissions":
            subs = self.submissions.get(course_id, [])
            if item_id != "-":
                subs = [s for s in subs if s.get("courseWorkId") == item_id]
            if params.get("userId") == "me":
                subs = [s for s in subs if s.get("userId") == self.me]
            return self._page("studentSubmissions", subs, request)

        return httpx.Response(404, json={"error": "not found"})

    def client(self) -> ClassroomClient:
        return ClassroomClient(
            "provider-token",
            base_url=TEST_API_BASE,
            transport=httpx.MockTransport(self.handle),
        )


def student_record(user_id: str, name: str | None, email: str | None = None) -> dict:
    profile: dict = {"id": user_id}
    if name is not None:
        profile["name"] = {"fullName": name}
    if email is not None:
        profile["emailAddress"] = email
    return {"courseId": "c1", "userId": user_id, "profile": profile}


def turned_in(ts: str | None) -> dict:
    entry: dict = {"state": "TURNED_IN"}
    if ts is not None:
        entry["stateTimestamp"] = ts
    return {"stateHistory": entry}


def login(client, google_id: str = TEACHER_GOOGLE_ID, email: str = "teacher@example.com", name: str = "Teacher") -> str:
    r = client.post(
        "/auth/session",
        json={"access_token": "provider-token", "google_id": google_id, "email": email, "name": name},
    )
    assert r.status_code == 201, r.text
    return r.json()["access_token"]


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}
