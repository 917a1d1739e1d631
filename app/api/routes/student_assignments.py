from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session, joinedload

from app.api.deps import ensure_owner, get_db, require_auth
from app.api.routes.students import get_owned_student
from app.core.csrf import require_csrf
from app.core.errors import NotFound
from app.core.rate_limit import RateLimitPresets, require_rate_limit
from app.models import LessonTopic, StudentAssignment, User
from app.schemas.assignment import AssignmentDetailOut, AssignmentReplace, AssignmentReplaceOut, AssignmentUpdate
from app.services.assignments import replace_assignments
from app.services.transformers import transform_assignment_from_api

router = APIRouter()

read_guards = [Depends(require_rate_limit(RateLimitPresets.LENIENT))]
write_guards = [Depends(require_rate_limit(RateLimitPresets.STRICT)), Depends(require_csrf)]


@router.get("/student-assignments", response_model=List[AssignmentDetailOut], dependencies=read_guards)
def list_assignments(
    student_id: str = Query(..., alias="studentId"),
    db: Session = Depends(get_db),
    user: User = Depends(require_auth),
):
    student = get_owned_student(db, student_id, user)
    assignments = (
        db.query(StudentAssignment)
        .options(joinedload(StudentAssignment.topic).joinedload(LessonTopic.lesson))
        .filter(StudentAssignment.student_id == student.id)
        .order_by(StudentAssignment.assigned_at.asc())
        .all()
    )
    return assignments


@router.post(
    "/student-assignments",
    response_model=AssignmentReplaceOut,
    status_code=status.HTTP_201_CREATED,
    dependencies=write_guards,
)
def assign_topics(
    payload: AssignmentReplace,
    db: Session = Depends(get_db),
    user: User = Depends(require_auth),
):
    student = get_owned_student(db, payload.student_id, user)
    try:
        result = replace_assignments(db, student, payload.topic_ids, user, payload.question_counts)
        db.commit()
    except Exception:
        db.rollback()
        raise
    return result


@router.put(
    "/student-assignments/{assignment_id}",
    response_model=AssignmentDetailOut,
    dependencies=write_guards,
)
def update_assignment(
    assignment_id: str,
    payload: AssignmentUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(require_auth),
):
    assignment = db.get(StudentAssignment, assignment_id)
    if not assignment:
        raise NotFound("Ödev bulunamadı")
    ensure_owner(user, assignment.student.teacher_id, "Bu ödeve erişim izniniz yok")

    values = transform_assignment_from_api(payload.model_dump(by_alias=True, exclude_unset=True))
    if values.get("completed") is not None:
        assignment.completed = values["completed"]
        assignment.student_assignment_completed_at = datetime.utcnow() if values["completed"] else None
    if "question_counts" in values:
        assignment.question_counts = values["question_counts"]

    db.commit()
    db.refresh(assignment)
    return assignment
