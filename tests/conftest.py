import os

TEST_DB_FILE = "test_classroom_dashboard.db"
TEST_DB_URL = f"sqlite:///./{TEST_DB_FILE}"

# point the app engine at the throwaway database before it is imported
os.environ["DATABASE_URL"] = TEST_DB_URL

import pytest
from fastapi import Depends
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from classroom_dashboard.core.current_user import get_current_user
from classroom_dashboard.core.deps import get_classroom_client, get_db
from classroom_dashboard.db.base import Base
from classroom_dashboard.main import app
from classroom_dashboard.models.attendance import Attendance
from classroom_dashboard.models.user import User
from classroom_dashboard.schemas.auth import SessionUser
from tests.helpers import TEACHER_GOOGLE_ID, FakeClassroom, student_record, turned_in

engine = create_engine(
    TEST_DB_URL,
    connect_args={"check_same_thread": False},
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="session", autouse=True)
def setup_test_db():
    """Create a fresh schema once for the whole test session."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)
    if os.path.exists(TEST_DB_FILE):
        os.remove(TEST_DB_FILE)


@pytest.fixture(autouse=True)
def clean_db():
    """Every test starts with empty tables."""
    db = TestingSessionLocal()
    try:
        # child -> parent
        db.query(Attendance).delete()
        db.query(User).delete()
        db.commit()
        yield
    finally:
        db.close()


@pytest.fixture()
def classroom():
    """A course c1 taught by the session user, with two students and two coursework items."""
    fake = FakeClassroom()
    fake.courses["c1"] = {
        "id": "c1",
        "name": "Algebra",
        "section": "A",
        "ownerId": "someone-else",
        "courseState": "ACTIVE",
    }
    fake.teacher_courses = [fake.courses["c1"]]
    fake.students["c1"] = [
        student_record("s-1", "Ana Perez", "ana@example.com"),
        student_record("s-2", "Bruno Diaz", "bruno@example.com"),
    ]
    fake.teachers["c1"] = [
        {"courseId": "c1", "userId": TEACHER_GOOGLE_ID, "profile": {"name": {"fullName": "Teacher"}}}
    ]
    fake.coursework["c1"] = [
        {
            "id": "w1",
            "title": "Homework 1",
            "dueDate": {"year": 2024, "month": 3, "day": 10},
            "dueTime": {"hours": 23, "minutes": 59, "seconds": 59},
            "maxPoints": 10,
        },
        {"id": "w2", "title": "Reading"},
    ]
    fake.submissions["c1"] = [
        {
            "courseWorkId": "w1",
            "userId": "s-1",
            "state": "TURNED_IN",
            "assignedGrade": 9,
            "submissionHistory": [
                {"stateHistory": {"state": "CREATED", "stateTimestamp": "2024-03-01T10:00:00Z"}},
                turned_in("2024-03-10T18:00:00Z"),
            ],
        },
        {
            "courseWorkId": "w2",
            "userId": "s-1",
            "state": "CREATED",
            "submissionHistory": [],
        },
        {
            "courseWorkId": "w1",
            "userId": "s-2",
            "state": "TURNED_IN",
            "submissionHistory": [turned_in("2024-03-12T09:00:00Z")],
        },
    ]
    fake.announcements["c1"] = [{"id": "a1", "courseId": "c1", "text": "Welcome"}]
    return fake


@pytest.fixture()
def client(classroom, monkeypatch):
    """Test client wired to the test DB and the fake classroom API."""
    monkeypatch.setattr("classroom_dashboard.routers.courses.DUE_DATE_TIMEZONE", "UTC")
    monkeypatch.setattr("classroom_dashboard.routers.dashboard.DUE_DATE_TIMEZONE", "UTC")

    def override_get_classroom_client(me: SessionUser = Depends(get_current_user)):
        classroom.me = me.google_id
        with classroom.client() as c:
            yield c

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_classroom_client] = override_get_classroom_client
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def db_session():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
