from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.deps import ensure_owner, get_db, require_auth
from app.api.routes.lessons import get_owned_lesson
from app.core.csrf import require_csrf
from app.core.errors import NotFound, ValidationFailed
from app.core.rate_limit import RateLimitPresets, require_rate_limit
from app.models import Lesson, LessonTopic, User
from app.schemas.common import MessageOut, SuccessOut, validate_request
from app.schemas.topic import (
    TopicCreate,
    TopicOrderFixOut,
    TopicOut,
    TopicReorder,
    TopicUpdate,
    TopicWithCountOut,
)
from app.services.topics import (
    densify_topic_orders,
    fix_topic_orders,
    next_topic_order,
    reorder_topics,
    topic_question_counts,
)
from app.services.transformers import transform_topic_from_api, transform_topic_to_api

router = APIRouter()

read_guards = [Depends(require_rate_limit(RateLimitPresets.LENIENT))]
write_guards = [Depends(require_rate_limit(RateLimitPresets.STRICT)), Depends(require_csrf)]


def get_owned_topic(db: Session, topic_id: str, user: User) -> LessonTopic:
    topic = db.get(LessonTopic, topic_id)
    if not topic:
        raise NotFound("Konu bulunamadı")
    ensure_owner(user, topic.lesson.teacher_id, "Bu konuya erişim izniniz yok")
    return topic


@router.get("/topics", response_model=List[TopicWithCountOut], dependencies=read_guards)
def list_topics(
    lesson_id: Optional[str] = Query(None, alias="lessonId"),
    db: Session = Depends(get_db),
    user: User = Depends(require_auth),
):
    query = db.query(LessonTopic)
    if lesson_id:
        get_owned_lesson(db, lesson_id, user)
        query = query.filter(LessonTopic.lesson_id == lesson_id)
    elif not user.is_super_admin:
        query = query.join(Lesson).filter(Lesson.teacher_id == user.id)
    topics = query.order_by(LessonTopic.lesson_id, LessonTopic.lesson_topic_order.asc()).all()

    counts = topic_question_counts(db, [topic.id for topic in topics])
    data = []
    for topic in topics:
        item = transform_topic_to_api(topic)
        item["questionCount"] = counts.get(topic.id, 0)
        data.append(item)
    return data


@router.post(
    "/topics",
    response_model=TopicOut,
    status_code=status.HTTP_201_CREATED,
    dependencies=write_guards,
)
def create_topic(
    payload: TopicCreate,
    db: Session = Depends(get_db),
    user: User = Depends(require_auth),
):
    get_owned_lesson(db, payload.lesson_id, user)
    values = transform_topic_from_api(payload.model_dump(by_alias=True))
    if values.get("lesson_topic_order") is None:
        values["lesson_topic_order"] = next_topic_order(db, payload.lesson_id)
    topic = LessonTopic(**values)
    db.add(topic)
    db.commit()
    db.refresh(topic)
    return transform_topic_to_api(topic)


@router.put("/topics/reorder", response_model=SuccessOut, dependencies=write_guards)
def reorder(
    body: Dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
    user: User = Depends(require_auth),
):
    result = validate_request(TopicReorder, body)
    if not result.success:
        raise ValidationFailed(result.error)
    payload = result.data

    lesson = get_owned_lesson(db, payload.lesson_id, user)
    try:
        reorder_topics(db, lesson, payload.topic_ids)
        db.commit()
    except Exception:
        db.rollback()
        raise
    return {"success": True}


@router.post("/topics/fix-orders", response_model=TopicOrderFixOut, dependencies=write_guards)
def fix_orders(db: Session = Depends(get_db), user: User = Depends(require_auth)):
    query = db.query(Lesson)
    if not user.is_super_admin:
        query = query.filter(Lesson.teacher_id == user.id)
    summary = fix_topic_orders(db, query.all())
    db.commit()
    return {"success": True, **summary}


@router.put("/topics/{topic_id}", response_model=TopicOut, dependencies=write_guards)
def update_topic(
    topic_id: str,
    payload: TopicUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(require_auth),
):
    topic = get_owned_topic(db, topic_id, user)
    values = transform_topic_from_api(payload.model_dump(by_alias=True, exclude_unset=True))
    for key, value in values.items():
        if value is not None:
            setattr(topic, key, value)
    db.commit()
    db.refresh(topic)
    return transform_topic_to_api(topic)


@router.delete("/topics/{topic_id}", response_model=MessageOut, dependencies=write_guards)
def delete_topic(topic_id: str, db: Session = Depends(get_db), user: User = Depends(require_auth)):
    topic = get_owned_topic(db, topic_id, user)
    lesson_id = topic.lesson_id
    try:
        densify_topic_orders(db, lesson_id, exclude_id=topic.id)
        db.delete(topic)
        db.commit()
    except Exception:
        db.rollback()
        raise
    return {"message": "Konu silindi"}
