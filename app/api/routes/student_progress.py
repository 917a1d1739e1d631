from typing import List, Optional, Union

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session, joinedload

from app.api.deps import ensure_owner, get_db, get_optional_actor, require_auth
from app.api.routes.students import get_owned_student
from app.core.csrf import require_csrf
from app.core.errors import Forbidden, NotFound, Unauthorized, ValidationFailed
from app.core.rate_limit import RateLimitPresets, require_rate_limit
from app.models import LessonTopic, Resource, Student, StudentProgress, User
from app.schemas.common import MessageOut
from app.schemas.progress import (
    ProgressAnswers,
    ProgressAnswersOut,
    ProgressDetailOut,
    ProgressIncrement,
    ProgressInitialize,
    ProgressInitializeOut,
    ProgressUpdate,
    ProgressUpsert,
)
from app.services.progress import (
    apply_counts,
    check_progress_refs,
    increment_progress,
    initialize_progress,
    record_answers,
    upsert_progress,
)
from app.services.transformers import transform_progress_from_api

router = APIRouter()

read_guards = [Depends(require_rate_limit(RateLimitPresets.LENIENT))]
write_guards = [Depends(require_rate_limit(RateLimitPresets.STRICT)), Depends(require_csrf)]

Actor = Union[User, Student, None]


def get_owned_progress(db: Session, progress_id: str, user: User) -> StudentProgress:
    progress = db.get(StudentProgress, progress_id)
    if not progress:
        raise NotFound("İlerleme kaydı bulunamadı")
    ensure_owner(user, progress.student.teacher_id, "Bu kayda erişim izniniz yok")
    return progress


def check_write_refs(db: Session, payload, user: User) -> None:
    get_owned_student(db, payload.student_id, user)
    check_progress_refs(db, payload.student_id, payload.assignment_id, payload.resource_id, payload.topic_id)
    resource = db.get(Resource, payload.resource_id)
    ensure_owner(user, resource.teacher_id, "Bu kaynağa erişim izniniz yok")


@router.get("/student-progress", response_model=List[ProgressDetailOut], dependencies=read_guards)
def list_progress(
    student_id: Optional[str] = Query(None, alias="studentId"),
    assignment_id: Optional[str] = Query(None, alias="assignmentId"),
    topic_id: Optional[str] = Query(None, alias="topicId"),
    resource_id: Optional[str] = Query(None, alias="resourceId"),
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_optional_actor),
):
    if actor is None:
        raise Unauthorized()

    query = db.query(StudentProgress).options(
        joinedload(StudentProgress.student),
        joinedload(StudentProgress.resource),
        joinedload(StudentProgress.topic),
    )
    if isinstance(actor, Student):
        if student_id and student_id != actor.id:
            raise Forbidden("Bu kayda erişim izniniz yok")
        query = query.filter(StudentProgress.student_id == actor.id)
    elif student_id:
        get_owned_student(db, student_id, actor)
        query = query.filter(StudentProgress.student_id == student_id)
    elif not actor.is_super_admin:
        query = query.join(Student, StudentProgress.student_id == Student.id).filter(
            Student.teacher_id == actor.id
        )

    if assignment_id:
        query = query.filter(StudentProgress.student_assignment_id == assignment_id)
    if topic_id:
        query = query.filter(StudentProgress.lesson_topic_id == topic_id)
    if resource_id:
        query = query.filter(StudentProgress.resource_id == resource_id)

    rows = query.order_by(StudentProgress.last_solved_at.desc()).all()
    return rows


@router.post(
    "/student-progress",
    response_model=ProgressDetailOut,
    status_code=status.HTTP_201_CREATED,
    dependencies=write_guards,
)
def save_progress(
    payload: ProgressUpsert,
    db: Session = Depends(get_db),
    user: User = Depends(require_auth),
):
    check_write_refs(db, payload, user)
    counts = transform_progress_from_api(payload.model_dump(by_alias=True))
    progress = upsert_progress(
        db,
        payload.student_id,
        payload.assignment_id,
        payload.resource_id,
        payload.topic_id,
        counts,
    )
    db.refresh(progress)
    return progress


@router.post(
    "/student-progress/increment",
    response_model=ProgressDetailOut,
    status_code=status.HTTP_201_CREATED,
    dependencies=write_guards,
)
def increment(
    payload: ProgressIncrement,
    db: Session = Depends(get_db),
    user: User = Depends(require_auth),
):
    check_write_refs(db, payload, user)
    progress = increment_progress(
        db,
        payload.student_id,
        payload.assignment_id,
        payload.resource_id,
        payload.topic_id,
        payload.increment,
    )
    return progress


@router.post("/student-progress/update", response_model=ProgressAnswersOut, dependencies=write_guards)
def record_topic_answers(
    payload: ProgressAnswers,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_optional_actor),
):
    if actor is None:
        raise Unauthorized()
    if isinstance(actor, Student):
        if payload.student_id and payload.student_id != actor.id:
            raise Forbidden("Bu kayda erişim izniniz yok")
        student_id = actor.id
    else:
        if not payload.student_id:
            raise ValidationFailed([{"field": "studentId", "message": "Bu alan zorunludur"}])
        student_id = get_owned_student(db, payload.student_id, actor).id

    progress = record_answers(
        db,
        student_id,
        payload.topic_id,
        payload.correct_count,
        payload.wrong_count,
        payload.empty_count,
        resource_id=payload.resource_id,
    )
    db.commit()
    db.refresh(progress)
    topic = db.get(LessonTopic, progress.lesson_topic_id)
    return {
        "success": True,
        "data": {
            "topicId": progress.lesson_topic_id,
            "correctCount": progress.correct_count,
            "wrongCount": progress.wrong_count,
            "emptyCount": progress.empty_count,
            "solvedCount": progress.solved_count,
            "totalCount": progress.total_count,
            "topicName": topic.lesson_topic_name,
            "lessonName": topic.lesson.name,
        },
    }


@router.post("/student-progress/initialize", response_model=ProgressInitializeOut, dependencies=write_guards)
def initialize(
    payload: ProgressInitialize,
    db: Session = Depends(get_db),
    user: User = Depends(require_auth),
):
    student = get_owned_student(db, payload.student_id, user)
    summary = initialize_progress(db, student)
    db.commit()
    return {"success": True, **summary}


@router.get("/student-progress/{progress_id}", response_model=ProgressDetailOut, dependencies=read_guards)
def get_progress(progress_id: str, db: Session = Depends(get_db), user: User = Depends(require_auth)):
    return get_owned_progress(db, progress_id, user)


@router.put("/student-progress/{progress_id}", response_model=ProgressDetailOut, dependencies=write_guards)
def update_progress(
    progress_id: str,
    payload: ProgressUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(require_auth),
):
    progress = get_owned_progress(db, progress_id, user)
    apply_counts(progress, transform_progress_from_api(payload.model_dump(by_alias=True, exclude_unset=True)))
    db.commit()
    db.refresh(progress)
    return progress


@router.delete("/student-progress/{progress_id}", response_model=MessageOut, dependencies=write_guards)
def delete_progress(progress_id: str, db: Session = Depends(get_db), user: User = Depends(require_auth)):
    progress = get_owned_progress(db, progress_id, user)
    db.delete(progress)
    db.commit()
    return {"message": "İlerleme kaydı silindi"}
