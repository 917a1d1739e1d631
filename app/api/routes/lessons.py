from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session, joinedload

from app.api.deps import ensure_owner, get_db, require_auth
from app.core.csrf import require_csrf
from app.core.errors import NotFound
from app.core.rate_limit import RateLimitPresets, require_rate_limit
from app.models import ExamType, Lesson, User
from app.schemas.common import MessageOut
from app.schemas.lesson import LessonCreate, LessonListItemOut, LessonOut, LessonRecolorOut, LessonUpdate
from app.schemas.topic import LessonDetailOut
from app.services.lessons import assign_colors, pick_lesson_color
from app.services.transformers import transform_lesson_from_api, transform_lesson_to_api, transform_lessons_to_api

router = APIRouter()

read_guards = [Depends(require_rate_limit(RateLimitPresets.LENIENT))]
write_guards = [Depends(require_rate_limit(RateLimitPresets.STRICT)), Depends(require_csrf)]


def get_owned_lesson(db: Session, lesson_id: str, user: User) -> Lesson:
    lesson = db.get(Lesson, lesson_id)
    if not lesson:
        raise NotFound("Ders bulunamadı")
    ensure_owner(user, lesson.teacher_id, "Bu derse erişim izniniz yok")
    return lesson


@router.get("/lessons", response_model=List[LessonListItemOut], dependencies=read_guards)
def list_lessons(
    type: Optional[ExamType] = Query(None),
    db: Session = Depends(get_db),
    user: User = Depends(require_auth),
):
    query = db.query(Lesson)
    if user.is_super_admin:
        query = query.options(joinedload(Lesson.teacher))
    else:
        query = query.filter(Lesson.teacher_id == user.id)
    if type is not None:
        query = query.filter(Lesson.lesson_exam_type == type)
    lessons = query.order_by(Lesson.created_at.desc()).all()

    if not user.is_super_admin:
        return transform_lessons_to_api(lessons)

    data = []
    for lesson in lessons:
        item = transform_lesson_to_api(lesson)
        item["teacher"] = {"name": lesson.teacher.name, "email": lesson.teacher.email}
        data.append(item)
    return data


@router.post(
    "/lessons",
    response_model=LessonOut,
    status_code=status.HTTP_201_CREATED,
    dependencies=write_guards,
)
def create_lesson(
    payload: LessonCreate,
    db: Session = Depends(get_db),
    user: User = Depends(require_auth),
):
    values = transform_lesson_from_api(payload.model_dump(by_alias=True))
    if values.get("color") is None:
        values["color"] = pick_lesson_color(db, user.id)
    lesson = Lesson(teacher_id=user.id, **values)
    db.add(lesson)
    db.commit()
    db.refresh(lesson)
    return transform_lesson_to_api(lesson)


@router.post("/lessons/assign-colors", response_model=LessonRecolorOut, dependencies=write_guards)
def recolor_lessons(db: Session = Depends(get_db), user: User = Depends(require_auth)):
    lessons = assign_colors(db, user.id)
    db.commit()
    return {
        "message": f"{len(lessons)} derse renk atandı",
        "lessons": transform_lessons_to_api(lessons),
    }


@router.get("/lessons/{lesson_id}", response_model=LessonDetailOut, dependencies=read_guards)
def get_lesson(lesson_id: str, db: Session = Depends(get_db), user: User = Depends(require_auth)):
    return get_owned_lesson(db, lesson_id, user)


@router.put("/lessons/{lesson_id}", response_model=LessonOut, dependencies=write_guards)
def update_lesson(
    lesson_id: str,
    payload: LessonUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(require_auth),
):
    lesson = get_owned_lesson(db, lesson_id, user)
    values = transform_lesson_from_api(payload.model_dump(by_alias=True, exclude_unset=True))
    for key, value in values.items():
        # only the subject may be cleared
        if value is None and key != "lesson_subject":
            continue
        setattr(lesson, key, value)
    db.commit()
    db.refresh(lesson)
    return transform_lesson_to_api(lesson)


@router.delete("/lessons/{lesson_id}", response_model=MessageOut, dependencies=write_guards)
def delete_lesson(lesson_id: str, db: Session = Depends(get_db), user: User = Depends(require_auth)):
    lesson = get_owned_lesson(db, lesson_id, user)
    db.delete(lesson)
    db.commit()
    return {"message": "Ders silindi"}
