from fastapi import APIRouter, Depends, Query

from classroom_dashboard.core.config import DUE_DATE_TIMEZONE
from classroom_dashboard.core.current_user import get_current_user
from classroom_dashboard.core.deps import get_classroom_client
from classroom_dashboard.schemas.auth import SessionUser
from classroom_dashboard.schemas.dashboard import DashboardRead
from classroom_dashboard.services.classroom_client import ClassroomClient
from classroom_dashboard.services.dashboard import build_dashboard
from classroom_dashboard.services.submissions import resolve_timezone

router = APIRouter(tags=["dashboard"])


@router.get("/dashboard", response_model=DashboardRead)
def dashboard(
    course_id: list[str] = Query(default=[]),
    me: SessionUser = Depends(get_current_user),
    client: ClassroomClient = Depends(get_classroom_client),
):
    # selected courses travel with the request; nothing is stored server side
    selected = list(dict.fromkeys(course_id))
    return build_dashboard(client, selected, me, tz=resolve_timezone(DUE_DATE_TIMEZONE))
