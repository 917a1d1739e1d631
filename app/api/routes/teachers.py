import logging
from typing import Dict

from fastapi import APIRouter, Depends, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.api.deps import get_db, require_super_admin
from app.core.csrf import require_csrf
from app.core.errors import Conflict, Forbidden, NotFound
from app.core.rate_limit import RateLimitPresets, require_rate_limit
from app.core.security import hash_password
from app.models import Lesson, Resource, Student, User, UserRole
from app.schemas.auth import UserOut
from app.schemas.common import MessageOut
from app.schemas.teacher import TeacherCountsOut, TeacherCreate, TeacherListOut, TeacherOut, TeacherUpdate

logger = logging.getLogger(__name__)

router = APIRouter()

read_guards = [Depends(require_rate_limit(RateLimitPresets.LENIENT))]
write_guards = [Depends(require_rate_limit(RateLimitPresets.STRICT)), Depends(require_csrf)]


def count_by_teacher(db: Session, model) -> Dict[str, int]:
    rows = db.query(model.teacher_id, func.count(model.id)).group_by(model.teacher_id).all()
    return {teacher_id: count for teacher_id, count in rows}


def get_teacher(db: Session, teacher_id: str) -> User:
    teacher = db.get(User, teacher_id)
    if not teacher or teacher.role != UserRole.TEACHER:
        raise NotFound("Öğretmen bulunamadı")
    return teacher


def ensure_email_free(db: Session, email: str, exclude_id: str = "") -> None:
    if db.query(User).filter(User.email == email, User.id != exclude_id).first():
        raise Conflict("Bu e-posta adresi zaten kullanılıyor")


@router.post(
    "/teachers",
    response_model=UserOut,
    status_code=status.HTTP_201_CREATED,
    dependencies=write_guards,
)
def create_teacher(
    payload: TeacherCreate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_super_admin),
):
    ensure_email_free(db, payload.email)
    teacher = User(
        name=payload.name.strip(),
        email=payload.email,
        password=hash_password(payload.password),
        role=UserRole.TEACHER,
        subscription_end_date=payload.subscription_end_date,
    )
    db.add(teacher)
    db.commit()
    db.refresh(teacher)
    logger.info("Teacher %s created by %s", teacher.email, admin.email)
    return teacher


@router.get("/teachers", response_model=TeacherListOut, dependencies=read_guards)
def list_teachers(db: Session = Depends(get_db), admin: User = Depends(require_super_admin)):
    teachers = db.query(User).filter(User.role == UserRole.TEACHER).order_by(User.name.asc()).all()
    students = count_by_teacher(db, Student)
    lessons = count_by_teacher(db, Lesson)
    resources = count_by_teacher(db, Resource)

    data = [
        TeacherOut(
            **UserOut.model_validate(teacher).model_dump(),
            counts=TeacherCountsOut(
                students=students.get(teacher.id, 0),
                lessons=lessons.get(teacher.id, 0),
                resources=resources.get(teacher.id, 0),
            ),
        )
        for teacher in teachers
    ]
    return TeacherListOut(teachers=data, total=len(data))


@router.put("/teachers/{teacher_id}", response_model=UserOut, dependencies=write_guards)
def update_teacher(
    teacher_id: str,
    payload: TeacherUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_super_admin),
):
    teacher = get_teacher(db, teacher_id)
    values = payload.model_dump(exclude_unset=True)

    if values.get("email") and values["email"] != teacher.email:
        ensure_email_free(db, values["email"], exclude_id=teacher.id)
    if values.get("name"):
        teacher.name = values["name"].strip()
    if values.get("email"):
        teacher.email = values["email"]
    if "subscription_end_date" in values:
        teacher.subscription_end_date = values["subscription_end_date"]
    if values.get("password"):
        teacher.password = hash_password(values["password"])

    db.commit()
    db.refresh(teacher)
    return teacher


@router.delete("/teachers/{teacher_id}", response_model=MessageOut, dependencies=write_guards)
def delete_teacher(
    teacher_id: str,
    db: Session = Depends(get_db),
    admin: User = Depends(require_super_admin),
):
    if teacher_id == admin.id:
        raise Forbidden("Kendi hesabınızı silemezsiniz")
    teacher = get_teacher(db, teacher_id)
    email = teacher.email
    db.delete(teacher)
    db.commit()
    logger.info("Teacher %s deleted by %s", email, admin.email)
    return {"message": "Öğretmen silindi"}
