from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class SessionCreate(BaseModel):
    # token issued by the identity provider, forwarded to the classroom API
    access_token: str = Field(min_length=1)
    google_id: str = Field(min_length=1)
    email: EmailStr
    name: Optional[str] = None


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class SessionUser(BaseModel):
    google_id: str
    email: str
    name: Optional[str] = None
    provider_token: str


class SessionUserRead(BaseModel):
    google_id: str
    email: str
    name: Optional[str] = None
