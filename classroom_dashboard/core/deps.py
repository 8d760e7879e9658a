from fastapi import Depends

from classroom_dashboard.core.current_user import get_current_user
from classroom_dashboard.db.session import SessionLocal
from classroom_dashboard.schemas.auth import SessionUser
from classroom_dashboard.services.classroom_client import ClassroomClient


# every request that needs DB will get a fresh session, and it will always close.
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# same for the classroom API: one client per request, bound to the caller's token
def get_classroom_client(me: SessionUser = Depends(get_current_user)):
    with ClassroomClient(me.provider_token) as client:
        yield client
