from datetime import datetime
from typing import Any, List, Optional, Union

from pydantic import AliasChoices, Field, StrictBool, field_validator, model_validator

from app.schemas.assignment import AssignmentDetailOut
from app.schemas.common import ApiModel, ApiOut, PaginationOut, parse_iso_datetime


def _assignment_id(item: Any) -> Any:
    # accepts bare ids or assignment objects carrying an id
    if isinstance(item, dict):
        return item.get("id") or item.get("assignmentId")
    return item


class WeeklyScheduleCreate(ApiModel):
    student_id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=2, max_length=200)
    start_date: datetime
    end_date: datetime
    assignments: List[str] = Field(default_factory=list)

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def parse_date(cls, value):
        return parse_iso_datetime(value)

    @field_validator("assignments", mode="before")
    @classmethod
    def assignment_ids(cls, value):
        if value is None:
            return []
        if isinstance(value, list):
            return [_assignment_id(item) for item in value]
        return value

    @model_validator(mode="after")
    def check_range(self):
        if self.end_date <= self.start_date:
            raise ValueError("Bitiş tarihi başlangıç tarihinden sonra olmalıdır")
        return self


class WeeklyScheduleUpdate(ApiModel):
    title: Optional[str] = Field(None, min_length=2, max_length=200)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    is_active: Optional[StrictBool] = None

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def parse_date(cls, value):
        if value is None:
            return None
        return parse_iso_datetime(value)


class WeekTopicIn(ApiModel):
    assignment_id: str = Field(..., min_length=1)
    is_completed: StrictBool = False


class WeekUpdate(ApiModel):
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    week_topics: Optional[List[WeekTopicIn]] = None

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def parse_date(cls, value):
        if value is None:
            return None
        return parse_iso_datetime(value)


class WeeklyScheduleOut(ApiOut):
    id: str
    student_id: str
    title: str
    start_date: datetime
    end_date: datetime
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class WeekTopicOut(ApiOut):
    id: str
    week_plan_id: str
    assignment_id: str
    topic_order: int
    is_completed: bool
    completed_at: Optional[datetime] = None
    assignment: AssignmentDetailOut


class WeekOut(ApiOut):
    id: str
    schedule_id: str
    week_number: int
    start_date: datetime
    end_date: datetime


class WeekDetailOut(WeekOut):
    week_topics: List[WeekTopicOut] = Field(validation_alias=AliasChoices("weekTopics", "topics"))


class WeekWithScheduleOut(WeekDetailOut):
    schedule: WeeklyScheduleOut


class WeeklyScheduleDetailOut(WeeklyScheduleOut):
    week_plans: List[WeekDetailOut] = Field(validation_alias=AliasChoices("weekPlans", "weeks"))


class WeekPage(ApiOut):
    # weeks carry weekTopics only when includeTopics is set
    weeks: List[Union[WeekDetailOut, WeekOut]]
    pagination: PaginationOut
