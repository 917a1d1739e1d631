from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator, model_validator

from app.models.lesson import ExamType, Lesson, LessonColor
from app.schemas.common import ApiModel, ApiOut, blank_to_none
from app.services.transformers import transform_lesson_to_api


class LessonBase(ApiModel):
    subject: Optional[str] = Field(None, max_length=100)
    color: Optional[LessonColor] = None

    @field_validator("subject", mode="before")
    @classmethod
    def empty_subject(cls, value):
        return blank_to_none(value)


class LessonCreate(LessonBase):
    name: str = Field(..., min_length=2, max_length=100)
    group: str = Field(..., min_length=1, max_length=50)
    type: ExamType = ExamType.TYT


class LessonUpdate(LessonBase):
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    group: Optional[str] = Field(None, min_length=1, max_length=50)
    type: Optional[ExamType] = None


class LessonOut(ApiOut):
    id: str
    name: str
    group: str
    type: ExamType
    subject: Optional[str] = None
    color: LessonColor
    teacher_id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @model_validator(mode="before")
    @classmethod
    def from_storage(cls, value):
        if isinstance(value, Lesson):
            return transform_lesson_to_api(value)
        return value


class LessonTeacherOut(ApiOut):
    name: str
    email: str


class LessonListItemOut(LessonOut):
    # filled for super-admin listings only
    teacher: Optional[LessonTeacherOut] = None


class LessonRecolorOut(ApiOut):
    message: str
    lessons: List[LessonOut]
