from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from app.schemas.base import CamelModel, UtcDatetime


class UserCreate(CamelModel):
    user_id: Optional[str] = None
    password: Optional[str] = Field(default=None, max_length=128)
    role: Optional[str] = None
    email: Optional[EmailStr] = None
    name: Optional[str] = None
    branch: Optional[str] = None
    year: Optional[str] = None


class UserRegistered(CamelModel):
    user_id: str
    role: str
    id: str
    email: str
    verified: bool
    message: str
    # DEV ONLY
    verification_code: Optional[str] = None


class LoginRequest(CamelModel):
    user_id: Optional[str] = None
    password: Optional[str] = None


class LoginResponse(CamelModel):
    user_id: str
    role: str
    id: str
    verified: bool


class VerifyRequest(BaseModel):
    email: Optional[str] = None
    code: Optional[str] = None


class ResendRequest(BaseModel):
    email: Optional[str] = None


class VerificationStatus(CamelModel):
    message: Optional[str] = None
    verified: Optional[bool] = None
    verification_code: Optional[str] = None


class UserRead(CamelModel):
    """Profile without password or verification data."""

    id: str
    user_id: str
    role: str
    email: str
    name: Optional[str] = None
    profile_picture: Optional[str] = None
    branch: Optional[str] = None
    year: Optional[str] = None
    verified: bool
    created_at: UtcDatetime


class ProfileUpdate(CamelModel):
    name: Optional[str] = None
    profile_picture: Optional[str] = None
    branch: Optional[str] = None
    year: Optional[str] = None


class UserSummary(CamelModel):
    user_id: str
    name: Optional[str] = None
    email: str


class ProfessorOption(CamelModel):
    id: str
    user_id: str
    name: str
    email: str
