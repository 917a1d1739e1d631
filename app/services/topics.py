from typing import Dict, Iterable, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.errors import BadRequest
from app.models import Lesson, LessonTopic, ResourceTopic


def next_topic_order(db: Session, lesson_id: str) -> int:
    current = (
        db.query(func.max(LessonTopic.lesson_topic_order))
        .filter(LessonTopic.lesson_id == lesson_id)
        .scalar()
    )
    return (current or 0) + 1


def densify_topic_orders(db: Session, lesson_id: str, exclude_id: Optional[str] = None) -> int:
    """Rewrite a lesson's topic orders to 1..N keeping their current relative order."""
    query = db.query(LessonTopic).filter(LessonTopic.lesson_id == lesson_id)
    if exclude_id is not None:
        query = query.filter(LessonTopic.id != exclude_id)
    topics = query.order_by(LessonTopic.lesson_topic_order.asc(), LessonTopic.created_at.asc()).all()
    changed = 0
    for position, topic in enumerate(topics, start=1):
        if topic.lesson_topic_order != position:
            topic.lesson_topic_order = position
            changed += 1
    return changed


def reorder_topics(db: Session, lesson: Lesson, topic_ids: List[str]) -> None:
    if len(set(topic_ids)) != len(topic_ids):
        raise BadRequest("Aynı konu birden fazla kez gönderildi")

    topics = (
        db.query(LessonTopic)
        .filter(LessonTopic.lesson_id == lesson.id, LessonTopic.id.in_(topic_ids))
        .all()
    )
    if len(topics) != len(topic_ids):
        raise BadRequest("Bazı konular bu derse ait değil")

    by_id = {topic.id: topic for topic in topics}
    for index, topic_id in enumerate(topic_ids):
        by_id[topic_id].lesson_topic_order = index + 1


def fix_topic_orders(db: Session, lessons: Iterable[Lesson]) -> Dict[str, int]:
    lesson_count = 0
    updated = 0
    for lesson in lessons:
        lesson_count += 1
        updated += densify_topic_orders(db, lesson.id)
    return {"lessons": lesson_count, "updatedTopics": updated}


def topic_question_counts(db: Session, topic_ids: List[str]) -> Dict[str, int]:
    if not topic_ids:
        return {}
    rows = (
        db.query(ResourceTopic.lesson_topic_id, func.sum(ResourceTopic.question_count))
        .filter(ResourceTopic.lesson_topic_id.in_(topic_ids))
        .group_by(ResourceTopic.lesson_topic_id)
        .all()
    )
    return {topic_id: int(total or 0) for topic_id, total in rows}
