from fastapi import APIRouter, Depends, status

from classroom_dashboard.core.config import ACCESS_TOKEN_EXPIRE
from classroom_dashboard.core.current_user import get_current_user
from classroom_dashboard.core.security import create_access_token
from classroom_dashboard.schemas.auth import SessionCreate, SessionUser, SessionUserRead, Token

router = APIRouter()


@router.get("/ping")
def ping():
    return {"msg": "auth ok"}


@router.post(
    "/session",
    response_model=Token,
    status_code=status.HTTP_201_CREATED,
    responses={
        422: {"description": "Missing provider token or profile fields"},
    },
)
def create_session(payload: SessionCreate):
    # the identity provider already authenticated the user; we only sign what it gave us
    access_token = create_access_token(
        data={
            "sub": payload.google_id,
            "email": payload.email,
            "name": payload.name,
            "provider_token": payload.access_token,
        },
        expires_delta=ACCESS_TOKEN_EXPIRE,
    )

    return {
        "access_token": access_token,
        "token_type": "bearer",
    }


@router.get("/me", response_model=SessionUserRead)
def me(current_user: SessionUser = Depends(get_current_user)):
    return current_user
