from datetime import datetime
from typing import List, Optional

from pydantic import Field, StrictInt, field_validator, model_validator

from app.models.resource import Resource
from app.schemas.common import ApiModel, ApiOut, PaginationOut, blank_to_none
from app.schemas.lesson import LessonOut
from app.schemas.topic import TopicOut
from app.services.transformers import transform_lesson_to_api, transform_resource_to_api, transform_topic_to_api


class ResourceTopicIn(ApiModel):
    topic_id: str = Field(..., min_length=1)
    question_count: StrictInt = Field(0, ge=0)


class ResourceLessonIn(ApiModel):
    lesson_id: str = Field(..., min_length=1)
    topics: List[ResourceTopicIn] = Field(default_factory=list)


class ResourceBase(ApiModel):
    description: Optional[str] = Field(None, max_length=1000)
    lessons: Optional[List[ResourceLessonIn]] = None

    @field_validator("description", mode="before")
    @classmethod
    def empty_description(cls, value):
        return blank_to_none(value)


class ResourceCreate(ResourceBase):
    name: str = Field(..., min_length=2, max_length=200)


class ResourceUpdate(ResourceBase):
    name: Optional[str] = Field(None, min_length=2, max_length=200)


class ResourceTopicOut(TopicOut):
    question_count: int


class ResourceLessonOut(LessonOut):
    topics: List[ResourceTopicOut]


class ResourceOut(ApiOut):
    id: str
    name: str
    description: Optional[str] = None
    teacher_id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    lessons: List[ResourceLessonOut]

    @model_validator(mode="before")
    @classmethod
    def from_storage(cls, value):
        if not isinstance(value, Resource):
            return value
        lessons = []
        for link in value.lessons:
            topics = sorted(link.topics, key=lambda resource_topic: resource_topic.topic.lesson_topic_order)
            lessons.append(
                dict(
                    transform_lesson_to_api(link.lesson),
                    topics=[
                        dict(transform_topic_to_api(item.topic), questionCount=item.question_count)
                        for item in topics
                    ],
                )
            )
        return dict(transform_resource_to_api(value), lessons=lessons)


class ResourcePage(ApiOut):
    data: List[ResourceOut]
    pagination: PaginationOut
