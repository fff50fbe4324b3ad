"""Session schemas."""

from pydantic import BaseModel, EmailStr


class UserCredentials(BaseModel):
    email: EmailStr
    password: str


class SessionUser(BaseModel):
    email: str
