from datetime import datetime
from typing import List, Optional

from pydantic import Field, StrictInt, model_validator

from app.models.lesson import Lesson, LessonTopic
from app.schemas.common import ApiModel, ApiOut
from app.schemas.lesson import LessonOut
from app.services.transformers import transform_lesson_to_api, transform_topic_to_api


class TopicCreate(ApiModel):
    name: str = Field(..., min_length=2, max_length=200)
    lesson_id: str = Field(..., min_length=1)
    # appended after the lesson's last topic when omitted
    order: Optional[StrictInt] = Field(None, ge=1)


class TopicUpdate(ApiModel):
    name: Optional[str] = Field(None, min_length=2, max_length=200)
    order: Optional[StrictInt] = Field(None, ge=1)


class TopicReorder(ApiModel):
    lesson_id: str = Field(..., min_length=1)
    topic_ids: List[str] = Field(..., min_length=1)


class TopicOut(ApiOut):
    id: str
    name: str
    order: int
    lesson_id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @model_validator(mode="before")
    @classmethod
    def from_storage(cls, value):
        if isinstance(value, LessonTopic):
            return transform_topic_to_api(value)
        return value


class TopicWithCountOut(TopicOut):
    question_count: int = 0


class TopicWithLessonOut(TopicOut):
    lesson: LessonOut

    @model_validator(mode="before")
    @classmethod
    def from_storage(cls, value):
        if isinstance(value, LessonTopic):
            return dict(transform_topic_to_api(value), lesson=value.lesson)
        return value


class LessonDetailOut(LessonOut):
    topics: List[TopicOut]

    @model_validator(mode="before")
    @classmethod
    def from_storage(cls, value):
        if isinstance(value, Lesson):
            return dict(transform_lesson_to_api(value), topics=list(value.topics))
        return value


class TopicOrderFixOut(ApiOut):
    success: bool = True
    lessons: int
    updated_topics: int
