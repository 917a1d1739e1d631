from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from app.schemas.auth import UserOut
from app.schemas.common import ApiModel, ApiOut, blank_to_none, normalize_email, parse_iso_datetime


class TeacherBase(ApiModel):
    subscription_end_date: Optional[datetime] = None

    @field_validator("email", mode="before", check_fields=False)
    @classmethod
    def check_email(cls, value):
        email = normalize_email(value)
        if email is None:
            raise ValueError("Geçerli bir e-posta adresi giriniz")
        return email

    @field_validator("subscription_end_date", mode="before")
    @classmethod
    def parse_subscription(cls, value):
        value = blank_to_none(value)
        if value is None:
            return None
        return parse_iso_datetime(value)


class TeacherCreate(TeacherBase):
    name: str = Field(..., min_length=1, max_length=100)
    email: str
    password: str = Field(..., min_length=6)


class TeacherUpdate(TeacherBase):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[str] = None
    password: Optional[str] = None

    @field_validator("password", mode="before")
    @classmethod
    def check_password(cls, value):
        value = blank_to_none(value)
        if value is not None and len(str(value)) < 6:
            raise ValueError("Şifre en az 6 karakter olmalıdır")
        return value


class TeacherCountsOut(ApiOut):
    students: int = 0
    lessons: int = 0
    resources: int = 0


class TeacherOut(UserOut):
    counts: TeacherCountsOut = Field(alias="_count")


class TeacherListOut(ApiOut):
    teachers: List[TeacherOut]
    total: int
