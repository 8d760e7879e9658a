from fastapi import Depends, HTTPException, status

from classroom_dashboard.core.current_user import get_current_user
from classroom_dashboard.core.deps import get_classroom_client
from classroom_dashboard.schemas.auth import SessionUser
from classroom_dashboard.services.classroom import TEACHER, get_user_roles
from classroom_dashboard.services.classroom_client import ClassroomClient


def require_course_teacher(
    course_id: str,
    current_user: SessionUser = Depends(get_current_user),
    client: ClassroomClient = Depends(get_classroom_client),
) -> SessionUser:
    if get_user_roles(client).get(course_id) != TEACHER:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Teacher role required for this course",
        )
    return current_user
