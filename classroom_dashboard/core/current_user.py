from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError

from classroom_dashboard.core.security import decode_access_token
from classroom_dashboard.schemas.auth import SessionUser

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/session")


def get_current_user(token: str = Depends(oauth2_scheme)) -> SessionUser:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        payload = decode_access_token(token)
    except JWTError:
        raise credentials_exception

    google_id = payload.get("sub")
    provider_token = payload.get("provider_token")
    if not google_id or not provider_token:
        raise credentials_exception

    return SessionUser(
        google_id=google_id,
        email=payload.get("email") or "",
        name=payload.get("name"),
        provider_token=provider_token,
    )
