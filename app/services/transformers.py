"""Renaming between storage attribute names and the field names the API exposes.

Storage keeps prefixed names (``lesson_group``, ``lesson_topic_name``,
``resource_name``...) while clients see short camelCase names (``group``,
``name``...). ``*_from_api`` functions copy only the keys present in their
input so they can back partial updates.
"""
import enum
from typing import Any, Dict, Iterable, List

from app.models import Lesson, LessonTopic, Resource, StudentAssignment, StudentProgress

LESSON_FIELDS = {
    "name": "name",
    "group": "lesson_group",
    "type": "lesson_exam_type",
    "subject": "lesson_subject",
    "color": "color",
}

TOPIC_FIELDS = {
    "name": "lesson_topic_name",
    "order": "lesson_topic_order",
    "lessonId": "lesson_id",
}

RESOURCE_FIELDS = {
    "name": "resource_name",
    "description": "resource_description",
}

ASSIGNMENT_FIELDS = {
    "studentId": "student_id",
    "topicId": "lesson_topic_id",
    "completed": "completed",
    "completedAt": "student_assignment_completed_at",
    "questionCounts": "question_counts",
}

PROGRESS_FIELDS = {
    "studentId": "student_id",
    "assignmentId": "student_assignment_id",
    "resourceId": "resource_id",
    "topicId": "lesson_topic_id",
    "solvedCount": "solved_count",
    "correctCount": "correct_count",
    "wrongCount": "wrong_count",
    "emptyCount": "empty_count",
    "totalCount": "total_count",
    "lastSolvedAt": "last_solved_at",
}


def _plain(value: Any) -> Any:
    if isinstance(value, enum.Enum):
        return value.value
    return value


def _from_api(data: Dict[str, Any], fields: Dict[str, str]) -> Dict[str, Any]:
    return {column: data[key] for key, column in fields.items() if key in data}


def transform_lesson_to_api(lesson: Lesson) -> Dict[str, Any]:
    return {
        "id": lesson.id,
        "name": lesson.name,
        "group": lesson.lesson_group,
        "type": _plain(lesson.lesson_exam_type),
        "subject": lesson.lesson_subject,
        "color": _plain(lesson.color),
        "teacherId": lesson.teacher_id,
        "createdAt": lesson.created_at,
        "updatedAt": lesson.updated_at,
    }


def transform_lesson_from_api(data: Dict[str, Any]) -> Dict[str, Any]:
    return _from_api(data, LESSON_FIELDS)


def transform_topic_to_api(topic: LessonTopic) -> Dict[str, Any]:
    return {
        "id": topic.id,
        "name": topic.lesson_topic_name,
        "order": topic.lesson_topic_order,
        "lessonId": topic.lesson_id,
        "createdAt": topic.created_at,
        "updatedAt": topic.updated_at,
    }


def transform_topic_from_api(data: Dict[str, Any]) -> Dict[str, Any]:
    return _from_api(data, TOPIC_FIELDS)


def transform_resource_to_api(resource: Resource) -> Dict[str, Any]:
    return {
        "id": resource.id,
        "name": resource.resource_name,
        "description": resource.resource_description,
        "teacherId": resource.teacher_id,
        "createdAt": resource.created_at,
        "updatedAt": resource.updated_at,
    }


def transform_resource_from_api(data: Dict[str, Any]) -> Dict[str, Any]:
    return _from_api(data, RESOURCE_FIELDS)


def transform_assignment_to_api(assignment: StudentAssignment) -> Dict[str, Any]:
    return {
        "id": assignment.id,
        "studentId": assignment.student_id,
        "topicId": assignment.lesson_topic_id,
        "assignedAt": assignment.assigned_at,
        "completed": assignment.completed,
        "completedAt": assignment.student_assignment_completed_at,
        "questionCounts": assignment.question_counts,
    }


def transform_assignment_from_api(data: Dict[str, Any]) -> Dict[str, Any]:
    return _from_api(data, ASSIGNMENT_FIELDS)


def transform_progress_to_api(progress: StudentProgress) -> Dict[str, Any]:
    return {
        "id": progress.id,
        "studentId": progress.student_id,
        "assignmentId": progress.student_assignment_id,
        "resourceId": progress.resource_id,
        "topicId": progress.lesson_topic_id,
        "solvedCount": progress.solved_count,
        "correctCount": progress.correct_count,
        "wrongCount": progress.wrong_count,
        "emptyCount": progress.empty_count,
        "totalCount": progress.total_count,
        "lastSolvedAt": progress.last_solved_at,
        "createdAt": progress.created_at,
        "updatedAt": progress.updated_at,
    }


def transform_progress_from_api(data: Dict[str, Any]) -> Dict[str, Any]:
    return _from_api(data, PROGRESS_FIELDS)


def transform_lessons_to_api(lessons: Iterable[Lesson]) -> List[Dict[str, Any]]:
    return [transform_lesson_to_api(lesson) for lesson in lessons]


def transform_topics_to_api(topics: Iterable[LessonTopic]) -> List[Dict[str, Any]]:
    return [transform_topic_to_api(topic) for topic in topics]


def transform_resources_to_api(resources: Iterable[Resource]) -> List[Dict[str, Any]]:
    return [transform_resource_to_api(resource) for resource in resources]


def transform_assignments_to_api(assignments: Iterable[StudentAssignment]) -> List[Dict[str, Any]]:
    return [transform_assignment_to_api(assignment) for assignment in assignments]


def transform_progress_list_to_api(progress_list: Iterable[StudentProgress]) -> List[Dict[str, Any]]:
    return [transform_progress_to_api(progress) for progress in progress_list]

