from datetime import datetime
from typing import Optional

from pydantic import Field, StrictInt, model_validator

from app.models.progress import StudentProgress
from app.schemas.common import ApiModel, ApiOut
from app.services.transformers import transform_progress_to_api


class ProgressKey(ApiModel):
    student_id: str = Field(..., min_length=1)
    assignment_id: str = Field(..., min_length=1)
    resource_id: str = Field(..., min_length=1)
    topic_id: str = Field(..., min_length=1)


class ProgressUpsert(ProgressKey):
    solved_count: Optional[StrictInt] = Field(None, ge=0)
    correct_count: Optional[StrictInt] = Field(None, ge=0)
    wrong_count: Optional[StrictInt] = Field(None, ge=0)
    empty_count: Optional[StrictInt] = Field(None, ge=0)
    total_count: Optional[StrictInt] = Field(None, ge=0)


class ProgressIncrement(ProgressKey):
    increment: StrictInt = 1


class ProgressUpdate(ApiModel):
    solved_count: Optional[StrictInt] = Field(None, ge=0)
    correct_count: Optional[StrictInt] = Field(None, ge=0)
    wrong_count: Optional[StrictInt] = Field(None, ge=0)
    empty_count: Optional[StrictInt] = Field(None, ge=0)
    total_count: Optional[StrictInt] = Field(None, ge=0)


class ProgressAnswers(ApiModel):
    """Answer breakdown submitted from the student question page."""

    student_id: Optional[str] = None
    topic_id: str = Field(..., min_length=1)
    resource_id: Optional[str] = None
    correct_count: StrictInt = Field(0, ge=0)
    wrong_count: StrictInt = Field(0, ge=0)
    empty_count: StrictInt = Field(0, ge=0)


class ProgressInitialize(ApiModel):
    student_id: str = Field(..., min_length=1)


class ProgressOut(ApiOut):
    id: str
    student_id: str
    assignment_id: str
    resource_id: str
    topic_id: str
    solved_count: int
    correct_count: int
    wrong_count: int
    empty_count: int
    total_count: Optional[int] = None
    last_solved_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @model_validator(mode="before")
    @classmethod
    def from_storage(cls, value):
        if isinstance(value, StudentProgress):
            return transform_progress_to_api(value)
        return value


class NamedRefOut(ApiOut):
    id: str
    name: str


class ProgressDetailOut(ProgressOut):
    student: NamedRefOut
    resource: NamedRefOut
    topic: NamedRefOut

    @model_validator(mode="before")
    @classmethod
    def from_storage(cls, value):
        if not isinstance(value, StudentProgress):
            return value
        return dict(
            transform_progress_to_api(value),
            student=value.student,
            resource={"id": value.resource.id, "name": value.resource.resource_name},
            topic={"id": value.topic.id, "name": value.topic.lesson_topic_name},
        )


class TopicAnswersOut(ApiOut):
    topic_id: str
    correct_count: int
    wrong_count: int
    empty_count: int
    solved_count: int
    total_count: Optional[int] = None
    topic_name: str
    lesson_name: str


class ProgressAnswersOut(ApiOut):
    success: bool = True
    data: TopicAnswersOut


class ProgressInitializeOut(ApiOut):
    success: bool = True
    created: int
    skipped: int
