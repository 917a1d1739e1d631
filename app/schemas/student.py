from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from app.schemas.assignment import AssignmentDetailOut
from app.schemas.common import ApiModel, ApiOut, PaginationOut, blank_to_none, normalize_email, normalize_phone
from app.schemas.progress import ProgressOut


class StudentBase(ApiModel):
    email: Optional[str] = None
    phone: Optional[str] = None
    parent_name: Optional[str] = Field(None, max_length=100)
    parent_phone: Optional[str] = None
    notes: Optional[str] = Field(None, max_length=1000)
    password: Optional[str] = None

    @field_validator("email", mode="before")
    @classmethod
    def check_email(cls, value):
        return normalize_email(value)

    @field_validator("phone", "parent_phone", mode="before")
    @classmethod
    def check_phone(cls, value):
        return normalize_phone(value)

    @field_validator("parent_name", "notes", mode="before")
    @classmethod
    def empty_text(cls, value):
        return blank_to_none(value)

    @field_validator("password", mode="before")
    @classmethod
    def check_password(cls, value):
        value = blank_to_none(value)
        if value is not None and len(str(value)) < 6:
            raise ValueError("Şifre en az 6 karakter olmalıdır")
        return value


class StudentCreate(StudentBase):
    name: str = Field(..., min_length=2, max_length=100)


class StudentUpdate(StudentBase):
    name: Optional[str] = Field(None, min_length=2, max_length=100)


class StudentOut(ApiOut):
    id: str
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    parent_name: Optional[str] = None
    parent_phone: Optional[str] = None
    notes: Optional[str] = None
    teacher_id: str
    has_password: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class StudentDetailOut(StudentOut):
    assignments: List[AssignmentDetailOut]
    progress: List[ProgressOut]


class StudentPage(ApiOut):
    data: List[StudentOut]
    pagination: PaginationOut


class StudentLoginOut(ApiOut):
    success: bool = True
    token: str
    student: StudentOut
