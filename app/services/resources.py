from typing import List

from sqlalchemy.orm import Session

from app.core.errors import BadRequest
from app.models import Lesson, LessonTopic, Resource, ResourceLesson, ResourceTopic, User
from app.schemas.resource import ResourceLessonIn


def attach_lessons(db: Session, resource: Resource, lessons: List[ResourceLessonIn], user: User) -> None:
    """Create the lesson links and per-topic question counts of ``resource``.

    Every lesson must belong to ``user`` (unless super admin) and every topic
    to its lesson. Nothing is committed here.
    """
    lesson_ids = [item.lesson_id for item in lessons]
    if len(set(lesson_ids)) != len(lesson_ids):
        raise BadRequest("Aynı ders birden fazla kez gönderildi")

    owned = {}
    if lesson_ids:
        query = db.query(Lesson).filter(Lesson.id.in_(lesson_ids))
        if not user.is_super_admin:
            query = query.filter(Lesson.teacher_id == user.id)
        owned = {lesson.id: lesson for lesson in query.all()}

    seen_topics = set()
    for item in lessons:
        if item.lesson_id not in owned:
            raise BadRequest("Ders bulunamadı veya erişim izniniz yok", details={"lessonId": item.lesson_id})

        topic_ids = [topic.topic_id for topic in item.topics]
        valid = set()
        if topic_ids:
            valid = {
                topic_id
                for (topic_id,) in db.query(LessonTopic.id).filter(
                    LessonTopic.lesson_id == item.lesson_id, LessonTopic.id.in_(topic_ids)
                )
            }

        link = ResourceLesson(lesson_id=item.lesson_id)
        resource.lessons.append(link)
        for topic in item.topics:
            if topic.topic_id not in valid:
                raise BadRequest("Konu bu derse ait değil", details={"topicId": topic.topic_id})
            if topic.topic_id in seen_topics:
                raise BadRequest("Aynı konu birden fazla kez gönderildi", details={"topicId": topic.topic_id})
            seen_topics.add(topic.topic_id)
            link.topics.append(
                ResourceTopic(resource=resource, lesson_topic_id=topic.topic_id, question_count=topic.question_count)
            )


def clear_lessons(db: Session, resource: Resource) -> None:
    for link in list(resource.lessons):
        resource.lessons.remove(link)
    for topic in list(resource.topics):
        resource.topics.remove(topic)
    db.flush()
