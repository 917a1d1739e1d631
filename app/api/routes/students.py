import logging
from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session, joinedload

from app.api.deps import ensure_owner, get_db, get_pagination, require_auth
from app.core.csrf import require_csrf
from app.core.errors import Conflict, NotFound, Unauthorized, ValidationFailed
from app.core.rate_limit import RateLimitPresets, require_rate_limit
from app.core.security import create_student_token, hash_password, verify_password
from app.models import LessonTopic, Student, StudentAssignment, StudentProgress, User
from app.schemas.auth import StudentLoginRequest
from app.schemas.common import MessageOut, PaginationParams, pagination_meta
from app.schemas.student import (
    StudentCreate,
    StudentDetailOut,
    StudentLoginOut,
    StudentOut,
    StudentPage,
    StudentUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter()

read_guards = [Depends(require_rate_limit(RateLimitPresets.LENIENT))]
write_guards = [Depends(require_rate_limit(RateLimitPresets.STRICT)), Depends(require_csrf)]

PASSWORD_REQUIRED = [{"field": "password", "message": "E-posta girildiğinde şifre zorunludur"}]


def get_owned_student(db: Session, student_id: str, user: User) -> Student:
    student = db.get(Student, student_id)
    if not student:
        raise NotFound("Öğrenci bulunamadı")
    ensure_owner(user, student.teacher_id, "Bu öğrenciye erişim izniniz yok")
    return student


def ensure_email_free(db: Session, email: str, exclude_id: Optional[str] = None) -> None:
    query = db.query(Student).filter(Student.email == email)
    if exclude_id is not None:
        query = query.filter(Student.id != exclude_id)
    if query.first():
        raise Conflict("Bu e-posta adresi zaten kullanılıyor")


@router.get("/students", response_model=StudentPage, dependencies=read_guards)
def list_students(
    pagination: PaginationParams = Depends(get_pagination),
    db: Session = Depends(get_db),
    user: User = Depends(require_auth),
):
    query = db.query(Student)
    if not user.is_super_admin:
        query = query.filter(Student.teacher_id == user.id)
    total = query.count()
    students = (
        query.order_by(Student.created_at.desc())
        .offset(pagination.offset)
        .limit(pagination.limit)
        .all()
    )
    return {
        "data": students,
        "pagination": pagination_meta(pagination.page, pagination.limit, total),
    }


@router.post(
    "/students",
    response_model=StudentOut,
    status_code=status.HTTP_201_CREATED,
    dependencies=write_guards,
)
def create_student(
    payload: StudentCreate,
    db: Session = Depends(get_db),
    user: User = Depends(require_auth),
):
    if payload.email and not payload.password:
        raise ValidationFailed(PASSWORD_REQUIRED)
    if payload.email:
        ensure_email_free(db, payload.email)

    student = Student(
        name=payload.name.strip(),
        email=payload.email,
        password=hash_password(payload.password) if payload.password else None,
        phone=payload.phone,
        parent_name=payload.parent_name,
        parent_phone=payload.parent_phone,
        notes=payload.notes,
        teacher_id=user.id,
    )
    db.add(student)
    db.commit()
    db.refresh(student)
    return student


@router.post(
    "/students/auth/login",
    response_model=StudentLoginOut,
    dependencies=[Depends(require_rate_limit(RateLimitPresets.AUTH)), Depends(require_csrf)],
)
def student_login(payload: StudentLoginRequest, db: Session = Depends(get_db)):
    student = db.query(Student).filter(Student.email == payload.email).first()
    if not student or not student.password or not verify_password(payload.password, student.password):
        logger.warning("Failed student login for %s", payload.email)
        raise Unauthorized("Geçersiz e-posta veya şifre")

    token = create_student_token(student.id, student.email, student.name)
    logger.info("Student %s logged in", student.id)
    return {"success": True, "token": token, "student": student}


@router.get("/students/{student_id}", response_model=StudentDetailOut, dependencies=read_guards)
def get_student(student_id: str, db: Session = Depends(get_db), user: User = Depends(require_auth)):
    student = get_owned_student(db, student_id, user)
    assignments = (
        db.query(StudentAssignment)
        .options(joinedload(StudentAssignment.topic).joinedload(LessonTopic.lesson))
        .filter(StudentAssignment.student_id == student.id)
        .order_by(StudentAssignment.assigned_at.asc())
        .all()
    )
    progress = (
        db.query(StudentProgress)
        .filter(StudentProgress.student_id == student.id)
        .order_by(StudentProgress.last_solved_at.desc())
        .all()
    )
    return StudentDetailOut(
        **StudentOut.model_validate(student).model_dump(),
        assignments=assignments,
        progress=progress,
    )


@router.put("/students/{student_id}", response_model=StudentOut, dependencies=write_guards)
def update_student(
    student_id: str,
    payload: StudentUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(require_auth),
):
    student = get_owned_student(db, student_id, user)
    values = payload.model_dump(exclude_unset=True)

    email = values.get("email", student.email)
    password = values.pop("password", None)
    if email and not (password or student.password):
        raise ValidationFailed(PASSWORD_REQUIRED)
    if values.get("email"):
        ensure_email_free(db, values["email"], exclude_id=student.id)

    if values.get("name") is None:
        values.pop("name", None)
    for key, value in values.items():
        setattr(student, key, value)
    if password:
        student.password = hash_password(password)

    db.commit()
    db.refresh(student)
    return student


@router.delete("/students/{student_id}", response_model=MessageOut, dependencies=write_guards)
def delete_student(student_id: str, db: Session = Depends(get_db), user: User = Depends(require_auth)):
    student = get_owned_student(db, student_id, user)
    db.delete(student)
    db.commit()
    return {"message": "Öğrenci silindi"}
