from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from app.models.user import UserRole
from app.schemas.common import ApiModel, ApiOut


class LoginRequest(ApiModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def strip_email(cls, value: str) -> str:
        return value.strip()


class StudentLoginRequest(LoginRequest):
    pass


class ProfileUpdate(ApiModel):
    name: str = Field(..., min_length=1, max_length=100)


class PasswordChange(ApiModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6)


class UserOut(ApiOut):
    id: str
    name: str
    email: str
    role: UserRole
    subscription_end_date: Optional[datetime] = None
    is_subscription_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class LoginOut(ApiOut):
    token: str
    user: UserOut


class CsrfTokenOut(ApiOut):
    csrf_token: str


class PasswordChangeOut(ApiOut):
    success: bool = True
    message: str
