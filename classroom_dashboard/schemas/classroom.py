"""
Typed records for the Classroom REST API.

The platform returns camelCase JSON with most fields optional; every model
accepts those aliases and also the snake_case names.
"""
from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator


class ClassroomRecord(BaseModel):
    class Config:
        populate_by_name = True
        extra = "ignore"


class ClassroomDate(ClassroomRecord):
    year: Optional[int] = None
    month: Optional[int] = None  # 1-based
    day: Optional[int] = None


class TimeOfDay(ClassroomRecord):
    hours: Optional[int] = None
    minutes: Optional[int] = None
    seconds: Optional[int] = None
    nanos: Optional[int] = None


class Name(ClassroomRecord):
    given_name: Optional[str] = Field(default=None, alias="givenName")
    family_name: Optional[str] = Field(default=None, alias="familyName")
    full_name: Optional[str] = Field(default=None, alias="fullName")


class UserProfile(ClassroomRecord):
    id: Optional[str] = None
    name: Optional[Name] = None
    email_address: Optional[str] = Field(default=None, alias="emailAddress")
    photo_url: Optional[str] = Field(default=None, alias="photoUrl")


class RosterMember(ClassroomRecord):
    course_id: Optional[str] = Field(default=None, alias="courseId")
    user_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("userId", "user_id", "id"),
        serialization_alias="userId",
    )
    profile: Optional[UserProfile] = None

    @property
    def full_name(self) -> Optional[str]:
        if self.profile and self.profile.name:
            return self.profile.name.full_name
        return None

    @property
    def email(self) -> Optional[str]:
        return self.profile.email_address if self.profile else None

    @property
    def photo_url(self) -> Optional[str]:
        return self.profile.photo_url if self.profile else None


class Student(RosterMember):
    pass


class Teacher(RosterMember):
    pass


class Course(ClassroomRecord):
    id: Optional[str] = None
    name: Optional[str] = None
    section: Optional[str] = None
    description: Optional[str] = None
    room: Optional[str] = None
    owner_id: Optional[str] = Field(default=None, alias="ownerId")
    course_state: Optional[str] = Field(default=None, alias="courseState")
    alternate_link: Optional[str] = Field(default=None, alias="alternateLink")
    enrollment_code: Optional[str] = Field(default=None, alias="enrollmentCode")
    creation_time: Optional[datetime] = Field(default=None, alias="creationTime")
    update_time: Optional[datetime] = Field(default=None, alias="updateTime")


class CourseWork(ClassroomRecord):
    id: Optional[str] = None
    course_id: Optional[str] = Field(default=None, alias="courseId")
    title: Optional[str] = None
    description: Optional[str] = None
    state: Optional[str] = None
    work_type: Optional[str] = Field(default=None, alias="workType")
    alternate_link: Optional[str] = Field(default=None, alias="alternateLink")
    due_date: Optional[ClassroomDate] = Field(default=None, alias="dueDate")
    due_time: Optional[TimeOfDay] = Field(default=None, alias="dueTime")
    max_points: Optional[float] = Field(default=None, alias="maxPoints")
    creation_time: Optional[datetime] = Field(default=None, alias="creationTime")
    update_time: Optional[datetime] = Field(default=None, alias="updateTime")


class Announcement(ClassroomRecord):
    id: Optional[str] = None
    course_id: Optional[str] = Field(default=None, alias="courseId")
    text: Optional[str] = None
    state: Optional[str] = None
    alternate_link: Optional[str] = Field(default=None, alias="alternateLink")
    creation_time: Optional[datetime] = Field(default=None, alias="creationTime")
    update_time: Optional[datetime] = Field(default=None, alias="updateTime")
    scheduled_time: Optional[datetime] = Field(default=None, alias="scheduledTime")


class StateHistory(ClassroomRecord):
    state: Optional[str] = None
    state_timestamp: Optional[datetime] = Field(default=None, alias="stateTimestamp")
    actor_user_id: Optional[str] = Field(default=None, alias="actorUserId")


class SubmissionHistory(ClassroomRecord):
    state_history: Optional[StateHistory] = Field(default=None, alias="stateHistory")


class StudentSubmission(ClassroomRecord):
    id: Optional[str] = None
    course_id: Optional[str] = Field(default=None, alias="courseId")
    course_work_id: Optional[str] = Field(default=None, alias="courseWorkId")
    user_id: Optional[str] = Field(default=None, alias="userId")
    state: Optional[str] = None
    late: Optional[bool] = None
    assigned_grade: Optional[float] = Field(default=None, alias="assignedGrade")
    draft_grade: Optional[float] = Field(default=None, alias="draftGrade")
    submission_history: list[SubmissionHistory] = Field(
        default_factory=list, alias="submissionHistory"
    )

    @field_validator("submission_history", mode="before")
    @classmethod
    def _null_history_is_empty(cls, v):
        return [] if v is None else v


class UserCourseRole(BaseModel):
    course_id: str
    role: str  # "TEACHER" | "STUDENT"


class ClassroomCourses(BaseModel):
    courses: list[Course]
    user_roles: list[UserCourseRole]


class CourseDetails(BaseModel):
    course: Course
    students: list[Student] = []
    teachers: list[Teacher] = []
    coursework: list[CourseWork] = []
    announcements: list[Announcement] = []
