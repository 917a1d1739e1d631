import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session, joinedload

from app.models import LessonTopic, Student, StudentAssignment, User

logger = logging.getLogger(__name__)


def question_counts_for_topic(question_counts: Optional[Dict[str, Dict[str, int]]], topic_id: str):
    """Narrow a resourceId -> topicId -> count map down to the entries for one topic."""
    if not question_counts:
        return None
    narrowed = {
        resource_id: {topic_id: counts[topic_id]}
        for resource_id, counts in question_counts.items()
        if topic_id in counts
    }
    return narrowed or None


def replace_assignments(
    db: Session,
    student: Student,
    topic_ids: List[str],
    user: User,
    question_counts: Optional[Dict[str, Dict[str, int]]] = None,
) -> Dict[str, Any]:
    """Drop every assignment of ``student`` and create one per topic id.

    Each topic is checked on its own; unknown topics, topics of another
    teacher and repeated ids end up as failed results while the rest are
    created. The caller commits.
    """
    for existing in db.query(StudentAssignment).filter(StudentAssignment.student_id == student.id).all():
        db.delete(existing)
    # deletes must reach the database before re-inserting the same topics
    db.flush()

    topics = {}
    if topic_ids:
        topics = {
            topic.id: topic
            for topic in db.query(LessonTopic)
            .options(joinedload(LessonTopic.lesson))
            .filter(LessonTopic.id.in_(topic_ids))
            .all()
        }

    results = []
    created = []
    seen = set()
    for topic_id in topic_ids:
        error = None
        topic = topics.get(topic_id)
        if topic_id in seen:
            error = "Konu birden fazla kez gönderildi"
        elif topic is None:
            error = "Konu bulunamadı"
        elif not user.is_super_admin and topic.lesson.teacher_id != user.id:
            error = "Bu konuya erişim izniniz yok"
        seen.add(topic_id)

        if error is not None:
            logger.warning("Assignment of topic %s to student %s failed: %s", topic_id, student.id, error)
            results.append({"topicId": topic_id, "success": False, "error": error})
            continue

        assignment = StudentAssignment(
            student_id=student.id,
            lesson_topic_id=topic_id,
            question_counts=question_counts_for_topic(question_counts, topic_id),
        )
        db.add(assignment)
        db.flush()
        created.append(assignment)
        results.append({"topicId": topic_id, "success": True, "assignmentId": assignment.id})

    total = db.query(StudentAssignment).filter(StudentAssignment.student_id == student.id).count()
    return {
        "message": f"{len(created)} konu atandı",
        "assignments": len(created),
        "studentId": student.id,
        "totalAssignments": total,
        "results": results,
    }
