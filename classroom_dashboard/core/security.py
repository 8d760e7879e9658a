from datetime import datetime, timedelta, timezone

from jose import jwt

from classroom_dashboard.core.config import ACCESS_TOKEN_EXPIRE, ALGORITHM, SECRET_KEY


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or ACCESS_TOKEN_EXPIRE)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: str) -> dict:
    # raises jose.JWTError on a bad signature or an expired token
    return jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
