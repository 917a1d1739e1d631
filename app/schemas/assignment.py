from datetime import datetime
from typing import Dict, List, Optional

from pydantic import Field, StrictBool, conint, model_validator

from app.models.assignment import StudentAssignment
from app.schemas.common import ApiModel, ApiOut
from app.schemas.topic import TopicWithLessonOut
from app.services.transformers import transform_assignment_to_api

# resourceId -> topicId -> question count
QuestionCounts = Dict[str, Dict[str, conint(strict=True, ge=0)]]


class AssignmentReplace(ApiModel):
    student_id: str = Field(..., min_length=1)
    topic_ids: List[str] = Field(default_factory=list)
    question_counts: Optional[QuestionCounts] = None


class AssignmentUpdate(ApiModel):
    completed: Optional[StrictBool] = None
    question_counts: Optional[QuestionCounts] = None


class AssignmentOut(ApiOut):
    id: str
    student_id: str
    topic_id: str
    assigned_at: Optional[datetime] = None
    completed: bool
    completed_at: Optional[datetime] = None
    question_counts: Optional[Dict[str, Dict[str, int]]] = None

    @model_validator(mode="before")
    @classmethod
    def from_storage(cls, value):
        if isinstance(value, StudentAssignment):
            return transform_assignment_to_api(value)
        return value


class AssignmentDetailOut(AssignmentOut):
    topic: Optional[TopicWithLessonOut] = None

    @model_validator(mode="before")
    @classmethod
    def from_storage(cls, value):
        if isinstance(value, StudentAssignment):
            return dict(transform_assignment_to_api(value), topic=value.topic)
        return value


class AssignmentResultOut(ApiOut):
    topic_id: str
    success: bool
    assignment_id: Optional[str] = None
    error: Optional[str] = None


class AssignmentReplaceOut(ApiOut):
    message: str
    assignments: int
    student_id: str
    total_assignments: int
    results: List[AssignmentResultOut]
