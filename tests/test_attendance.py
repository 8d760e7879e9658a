from classroom_dashboard.models.user import User
from tests.helpers import STUDENT_GOOGLE_ID, auth_header, login, student_record

DAY = "2024-03-11"


def _prepare(client, token, day=DAY):
    r = client.get(
        "/courses/c1/attendance/prepare",
        params={"day": day},
        headers=auth_header(token),
    )
    assert r.status_code == 200, r.text
    return r.json()


def _submit(client, token, day, marks):
    return client.post(
        "/courses/c1/attendance",
        json={
            "date": day,
            "attendances": [{"user_id": uid, "present": p} for uid, p in marks],
        },
        headers=auth_header(token),
    )


def test_prepare_mirrors_roster_into_users(client, db_session):
    token = login(client)
    body = _prepare(client, token)

    assert body["date"] == DAY
    assert body["has_existing_attendance"] is False
    assert [s["google_id"] for s in body["students"]] == ["s-1", "s-2"]
    assert all(s["present"] is False for s in body["students"])

    assert db_session.query(User).count() == 2


def test_prepare_twice_does_not_duplicate_users(client, classroom, db_session):
    token = login(client)
    _prepare(client, token)
    classroom.students["c1"][0]["profile"]["name"]["fullName"] = "Ana P. Perez"
    body = _prepare(client, token)

    assert body["students"][0]["name"] == "Ana P. Perez"
    assert db_session.query(User).count() == 2


def test_prepare_skips_incomplete_roster_entries(client, classroom):
    classroom.students["c1"].append(student_record("s-3", None, "nameless@example.com"))
    classroom.students["c1"].append(student_record("s-4", "No Email"))
    token = login(client)
    body = _prepare(client, token)

    assert [s["google_id"] for s in body["students"]] == ["s-1", "s-2"]


def test_submit_then_update(client):
    token = login(client)
    ana, bruno = (s["user_id"] for s in _prepare(client, token)["students"])

    r = _submit(client, token, DAY, [(ana, True), (bruno, False)])
    assert r.status_code == 201, r.text
    assert r.json()["saved"] == 2

    r = _submit(client, token, DAY, [(bruno, True)])
    assert r.status_code == 201

    r = client.get(f"/courses/c1/attendance/{DAY}", headers=auth_header(token))
    assert r.status_code == 200
    body = r.json()
    assert body["summary"] == {"total": 2, "present": 2, "absent": 0}
    assert {a["user"]["name"] for a in body["attendances"]} == {"Ana Perez", "Bruno Diaz"}

    prepared = _prepare(client, token)
    assert prepared["has_existing_attendance"] is True
    assert all(s["present"] for s in prepared["students"])


def test_timestamp_is_stored_as_calendar_day(client):
    token = login(client)
    ana = _prepare(client, token)["students"][0]["user_id"]

    r = _submit(client, token, "2024-03-11T15:30:00", [(ana, True)])
    assert r.status_code == 201, r.text
    assert r.json()["date"] == DAY


def test_repeated_user_in_one_submission_keeps_last_mark(client):
    token = login(client)
    ana = _prepare(client, token)["students"][0]["user_id"]

    r = _submit(client, token, DAY, [(ana, True), (ana, False)])
    assert r.status_code == 201, r.text
    assert r.json()["saved"] == 1
    assert r.json()["records"][0]["present"] is False


def test_unknown_user_is_404(client):
    token = login(client)
    _prepare(client, token)
    r = _submit(client, token, DAY, [(99999, True)])
    assert r.status_code == 404


def test_stats_and_dates(client):
    token = login(client)
    ana, bruno = (s["user_id"] for s in _prepare(client, token)["students"])

    _submit(client, token, "2024-03-11", [(ana, True), (bruno, False)])
    _submit(client, token, "2024-03-12", [(ana, True), (bruno, True)])
    _submit(client, token, "2024-03-13", [(ana, False), (bruno, True)])

    r = client.get("/courses/c1/attendance/stats", headers=auth_header(token))
    assert r.status_code == 200, r.text
    stats = r.json()
    assert stats["overall"] == {
        "total_records": 6,
        "present_count": 4,
        "absent_count": 2,
        "attendance_rate": 66.67,
    }
    by_name = {row["user"]["name"]: row for row in stats["by_student"]}
    assert by_name["Ana Perez"]["present"] == 2
    assert by_name["Ana Perez"]["rate"] == 66.67

    r = client.get(
        "/courses/c1/attendance/stats",
        params={"start_date": "2024-03-12", "end_date": "2024-03-12"},
        headers=auth_header(token),
    )
    assert r.json()["overall"]["attendance_rate"] == 100.0

    r = client.get("/courses/c1/attendance/dates", headers=auth_header(token))
    assert r.json() == ["2024-03-13", "2024-03-12", "2024-03-11"]


def test_empty_stats(client):
    token = login(client)
    r = client.get("/courses/c1/attendance/stats", headers=auth_header(token))
    assert r.status_code == 200
    assert r.json()["overall"]["attendance_rate"] == 0.0
    assert r.json()["by_student"] == []


def test_inverted_range_is_400(client):
    token = login(client)
    r = client.get(
        "/courses/c1/attendance/stats",
        params={"start_date": "2024-03-12", "end_date": "2024-03-01"},
        headers=auth_header(token),
    )
    assert r.status_code == 400


def test_students_cannot_take_attendance(client, classroom):
    classroom.teacher_courses = []
    classroom.student_courses = [classroom.courses["c1"]]
    token = login(client, google_id=STUDENT_GOOGLE_ID, email="ana@example.com", name="Ana Perez")

    r = client.get("/courses/c1/attendance/prepare", headers=auth_header(token))
    assert r.status_code == 403
    r = _submit(client, token, DAY, [(1, True)])
    assert r.status_code == 403
