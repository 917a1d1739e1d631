from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session, selectinload

from app.api.deps import ensure_owner, get_db, get_pagination, require_auth
from app.api.routes.students import get_owned_student
from app.core.csrf import require_csrf
from app.core.errors import BadRequest, NotFound
from app.core.rate_limit import RateLimitPresets, require_rate_limit
from app.models import (
    LessonTopic,
    StudentAssignment,
    User,
    WeeklySchedule,
    WeeklyScheduleTopic,
    WeeklyScheduleWeek,
)
from app.schemas.common import MessageOut, PaginationParams, pagination_meta
from app.schemas.weekly_schedule import (
    WeekDetailOut,
    WeekOut,
    WeekPage,
    WeekUpdate,
    WeeklyScheduleCreate,
    WeeklyScheduleDetailOut,
    WeeklyScheduleOut,
    WeeklyScheduleUpdate,
    WeekWithScheduleOut,
)
from app.services.scheduling import create_weekly_schedule

router = APIRouter()

read_guards = [Depends(require_rate_limit(RateLimitPresets.LENIENT))]
write_guards = [Depends(require_rate_limit(RateLimitPresets.STRICT)), Depends(require_csrf)]


def week_topics_load():
    return (
        selectinload(WeeklyScheduleWeek.topics)
        .joinedload(WeeklyScheduleTopic.assignment)
        .joinedload(StudentAssignment.topic)
        .joinedload(LessonTopic.lesson)
    )


def get_owned_schedule(db: Session, schedule_id: str, user: User) -> WeeklySchedule:
    schedule = db.get(WeeklySchedule, schedule_id)
    if not schedule:
        raise NotFound("Program bulunamadı")
    ensure_owner(user, schedule.student.teacher_id, "Bu programa erişim izniniz yok")
    return schedule


def get_schedule_week(db: Session, schedule: WeeklySchedule, week_id: str) -> WeeklyScheduleWeek:
    week = (
        db.query(WeeklyScheduleWeek)
        .filter(WeeklyScheduleWeek.id == week_id, WeeklyScheduleWeek.schedule_id == schedule.id)
        .first()
    )
    if not week:
        raise NotFound("Hafta bulunamadı")
    return week


@router.get("/weekly-schedules", response_model=List[WeeklyScheduleDetailOut], dependencies=read_guards)
def list_schedules(
    student_id: str = Query(..., alias="studentId"),
    db: Session = Depends(get_db),
    user: User = Depends(require_auth),
):
    student = get_owned_student(db, student_id, user)
    schedules = (
        db.query(WeeklySchedule)
        .options(selectinload(WeeklySchedule.weeks).options(week_topics_load()))
        .filter(WeeklySchedule.student_id == student.id)
        .order_by(WeeklySchedule.created_at.desc())
        .all()
    )
    return schedules


@router.post(
    "/weekly-schedules",
    response_model=WeeklyScheduleDetailOut,
    status_code=status.HTTP_201_CREATED,
    dependencies=write_guards,
)
def create_schedule(
    payload: WeeklyScheduleCreate,
    db: Session = Depends(get_db),
    user: User = Depends(require_auth),
):
    student = get_owned_student(db, payload.student_id, user)
    try:
        schedule = create_weekly_schedule(
            db,
            student,
            payload.title.strip(),
            payload.start_date,
            payload.end_date,
            payload.assignments,
        )
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(schedule)
    return schedule


@router.get("/weekly-schedules/{schedule_id}", response_model=WeeklyScheduleDetailOut, dependencies=read_guards)
def get_schedule(schedule_id: str, db: Session = Depends(get_db), user: User = Depends(require_auth)):
    return get_owned_schedule(db, schedule_id, user)


@router.put("/weekly-schedules/{schedule_id}", response_model=WeeklyScheduleOut, dependencies=write_guards)
def update_schedule(
    schedule_id: str,
    payload: WeeklyScheduleUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(require_auth),
):
    schedule = get_owned_schedule(db, schedule_id, user)
    for key, value in payload.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(schedule, key, value)
    if schedule.end_date <= schedule.start_date:
        raise BadRequest("Bitiş tarihi başlangıç tarihinden sonra olmalıdır")
    db.commit()
    db.refresh(schedule)
    return schedule


@router.delete("/weekly-schedules/{schedule_id}", response_model=MessageOut, dependencies=write_guards)
def delete_schedule(schedule_id: str, db: Session = Depends(get_db), user: User = Depends(require_auth)):
    schedule = get_owned_schedule(db, schedule_id, user)
    db.delete(schedule)
    db.commit()
    return {"message": "Program silindi"}


@router.get("/weekly-schedules/{schedule_id}/weeks", response_model=WeekPage, dependencies=read_guards)
def list_weeks(
    schedule_id: str,
    include_topics: bool = Query(False, alias="includeTopics"),
    pagination: PaginationParams = Depends(get_pagination),
    db: Session = Depends(get_db),
    user: User = Depends(require_auth),
):
    schedule = get_owned_schedule(db, schedule_id, user)
    query = db.query(WeeklyScheduleWeek).filter(WeeklyScheduleWeek.schedule_id == schedule.id)
    total = query.count()
    if include_topics:
        query = query.options(week_topics_load())
    weeks = (
        query.order_by(WeeklyScheduleWeek.week_number.asc())
        .offset(pagination.offset)
        .limit(pagination.limit)
        .all()
    )
    page_item = WeekDetailOut if include_topics else WeekOut
    return {
        "weeks": [page_item.model_validate(week) for week in weeks],
        "pagination": pagination_meta(pagination.page, pagination.limit, total),
    }


@router.get(
    "/weekly-schedules/{schedule_id}/weeks/{week_id}",
    response_model=WeekWithScheduleOut,
    dependencies=read_guards,
)
def get_week(
    schedule_id: str,
    week_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(require_auth),
):
    schedule = get_owned_schedule(db, schedule_id, user)
    return get_schedule_week(db, schedule, week_id)


@router.put(
    "/weekly-schedules/{schedule_id}/weeks/{week_id}",
    response_model=WeekDetailOut,
    dependencies=write_guards,
)
def update_week(
    schedule_id: str,
    week_id: str,
    payload: WeekUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(require_auth),
):
    schedule = get_owned_schedule(db, schedule_id, user)
    week = get_schedule_week(db, schedule, week_id)

    try:
        if payload.start_date is not None:
            week.start_date = payload.start_date
        if payload.end_date is not None:
            week.end_date = payload.end_date

        if payload.week_topics is not None:
            assignment_ids = [item.assignment_id for item in payload.week_topics]
            if len(set(assignment_ids)) != len(assignment_ids):
                raise BadRequest("Aynı ödev birden fazla kez gönderildi")
            if assignment_ids:
                owned = (
                    db.query(StudentAssignment)
                    .filter(
                        StudentAssignment.id.in_(assignment_ids),
                        StudentAssignment.student_id == schedule.student_id,
                    )
                    .count()
                )
                if owned != len(assignment_ids):
                    raise BadRequest("Ödev bu öğrenciye ait değil")

            # topics that stay completed keep their original stamp
            completed_at = {
                existing.assignment_id: existing.completed_at for existing in week.topics if existing.is_completed
            }
            for existing in list(week.topics):
                week.topics.remove(existing)
            db.flush()
            now = datetime.utcnow()
            for topic_order, item in enumerate(payload.week_topics, start=1):
                week.topics.append(
                    WeeklyScheduleTopic(
                        assignment_id=item.assignment_id,
                        topic_order=topic_order,
                        is_completed=item.is_completed,
                        completed_at=(completed_at.get(item.assignment_id) or now) if item.is_completed else None,
                    )
                )
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(week)
    return week
