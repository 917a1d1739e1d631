import logging
from datetime import datetime
from typing import Dict, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import BadRequest, NotFound
from app.models import Resource, ResourceTopic, Student, StudentAssignment, StudentProgress

logger = logging.getLogger(__name__)

COUNT_FIELDS = ("solved_count", "correct_count", "wrong_count", "empty_count", "total_count")


def _key_filters(student_id: str, assignment_id: str, resource_id: str):
    return (
        StudentProgress.student_id == student_id,
        StudentProgress.student_assignment_id == assignment_id,
        StudentProgress.resource_id == resource_id,
    )


def check_progress_refs(db: Session, student_id: str, assignment_id: str, resource_id: str, topic_id: str) -> None:
    assignment = db.get(StudentAssignment, assignment_id)
    if assignment is None:
        raise NotFound("Ödev bulunamadı")
    if assignment.student_id != student_id:
        raise BadRequest("Ödev bu öğrenciye ait değil")
    if assignment.lesson_topic_id != topic_id:
        raise BadRequest("Konu ödev ile eşleşmiyor")
    if db.get(Resource, resource_id) is None:
        raise NotFound("Kaynak bulunamadı")


def apply_counts(progress: StudentProgress, counts: Dict[str, Optional[int]]) -> bool:
    changed = False
    for field in COUNT_FIELDS:
        value = counts.get(field)
        if value is not None and getattr(progress, field) != value:
            setattr(progress, field, value)
            changed = True
    if changed:
        progress.last_solved_at = datetime.utcnow()
    return changed


def upsert_progress(
    db: Session,
    student_id: str,
    assignment_id: str,
    resource_id: str,
    topic_id: str,
    counts: Dict[str, Optional[int]],
) -> StudentProgress:
    """Overwrite the supplied counts of the keyed row, creating it when missing.

    Commits. A concurrent insert of the same key loses on the unique
    constraint and the counts are applied to the winning row instead.
    """
    filters = _key_filters(student_id, assignment_id, resource_id)
    progress = db.query(StudentProgress).filter(*filters).first()
    if progress is not None:
        apply_counts(progress, counts)
        db.commit()
        return progress

    progress = StudentProgress(
        student_id=student_id,
        student_assignment_id=assignment_id,
        resource_id=resource_id,
        lesson_topic_id=topic_id,
        last_solved_at=datetime.utcnow(),
    )
    for field in COUNT_FIELDS:
        value = counts.get(field)
        if value is not None:
            setattr(progress, field, value)
    db.add(progress)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.info("Progress row for %s/%s/%s created concurrently, updating it",
                    student_id, assignment_id, resource_id)
        progress = db.query(StudentProgress).filter(*filters).one()
        apply_counts(progress, counts)
        db.commit()
    return progress


def increment_progress(
    db: Session,
    student_id: str,
    assignment_id: str,
    resource_id: str,
    topic_id: str,
    increment: int = 1,
) -> StudentProgress:
    """Add ``increment`` to solved_count with a single UPDATE, creating the row when missing.

    Commits. A concurrent insert of the same key loses on the unique
    constraint and falls back to the UPDATE.
    """
    filters = _key_filters(student_id, assignment_id, resource_id)

    def bump() -> int:
        now = datetime.utcnow()
        return (
            db.query(StudentProgress)
            .filter(*filters)
            .update(
                {
                    StudentProgress.solved_count: StudentProgress.solved_count + increment,
                    StudentProgress.last_solved_at: now,
                    StudentProgress.updated_at: now,
                },
                synchronize_session=False,
            )
        )

    if not bump():
        db.add(
            StudentProgress(
                student_id=student_id,
                student_assignment_id=assignment_id,
                resource_id=resource_id,
                lesson_topic_id=topic_id,
                solved_count=increment,
                total_count=0,
                last_solved_at=datetime.utcnow(),
            )
        )
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            logger.info("Progress row for %s/%s/%s created concurrently, retrying update",
                        student_id, assignment_id, resource_id)
            bump()
            db.commit()
    else:
        db.commit()

    return db.query(StudentProgress).filter(*filters).populate_existing().one()


def record_answers(
    db: Session,
    student_id: str,
    topic_id: str,
    correct: int,
    wrong: int,
    empty: int,
    resource_id: Optional[str] = None,
) -> StudentProgress:
    query = db.query(StudentProgress).filter(
        StudentProgress.student_id == student_id,
        StudentProgress.lesson_topic_id == topic_id,
    )
    if resource_id:
        query = query.filter(StudentProgress.resource_id == resource_id)
    progress = query.order_by(StudentProgress.created_at.asc()).first()
    if progress is None:
        raise NotFound("İlerleme kaydı bulunamadı")

    progress.correct_count = correct
    progress.wrong_count = wrong
    progress.empty_count = empty
    progress.solved_count = correct + wrong + empty
    progress.last_solved_at = datetime.utcnow()
    return progress


def initialize_progress(db: Session, student: Student) -> Dict[str, int]:
    """Create zero-count rows for every assignment/resource pair the student lacks."""
    assignments = db.query(StudentAssignment).filter(StudentAssignment.student_id == student.id).all()
    existing = {
        (assignment_id, resource_id)
        for assignment_id, resource_id in db.query(
            StudentProgress.student_assignment_id, StudentProgress.resource_id
        ).filter(StudentProgress.student_id == student.id)
    }

    created = 0
    skipped = 0
    for assignment in assignments:
        links = (
            db.query(ResourceTopic)
            .filter(ResourceTopic.lesson_topic_id == assignment.lesson_topic_id)
            .all()
        )
        for link in links:
            if (assignment.id, link.resource_id) in existing:
                skipped += 1
                continue
            db.add(
                StudentProgress(
                    student_id=student.id,
                    student_assignment_id=assignment.id,
                    resource_id=link.resource_id,
                    lesson_topic_id=assignment.lesson_topic_id,
                    total_count=link.question_count,
                    last_solved_at=datetime.utcnow(),
                )
            )
            existing.add((assignment.id, link.resource_id))
            created += 1
    return {"created": created, "skipped": skipped}
