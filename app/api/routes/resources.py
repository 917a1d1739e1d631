from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session, selectinload

from app.api.deps import ensure_owner, get_db, get_pagination, require_auth
from app.core.csrf import require_csrf
from app.core.errors import NotFound
from app.core.rate_limit import RateLimitPresets, require_rate_limit
from app.models import Resource, ResourceLesson, ResourceTopic, User
from app.schemas.common import MessageOut, PaginationParams, pagination_meta
from app.schemas.resource import ResourceCreate, ResourceOut, ResourcePage, ResourceUpdate
from app.services.resources import attach_lessons, clear_lessons
from app.services.transformers import transform_resource_from_api

router = APIRouter()

read_guards = [Depends(require_rate_limit(RateLimitPresets.LENIENT))]
write_guards = [Depends(require_rate_limit(RateLimitPresets.STRICT)), Depends(require_csrf)]


def get_owned_resource(db: Session, resource_id: str, user: User) -> Resource:
    resource = db.get(Resource, resource_id)
    if not resource:
        raise NotFound("Kaynak bulunamadı")
    ensure_owner(user, resource.teacher_id, "Bu kaynağa erişim izniniz yok")
    return resource


@router.get("/resources", response_model=ResourcePage, dependencies=read_guards)
def list_resources(
    pagination: PaginationParams = Depends(get_pagination),
    db: Session = Depends(get_db),
    user: User = Depends(require_auth),
):
    query = db.query(Resource)
    if not user.is_super_admin:
        query = query.filter(Resource.teacher_id == user.id)
    total = query.count()
    resources = (
        query.options(
            selectinload(Resource.lessons).selectinload(ResourceLesson.lesson),
            selectinload(Resource.lessons).selectinload(ResourceLesson.topics).selectinload(ResourceTopic.topic),
        )
        .order_by(Resource.created_at.desc())
        .offset(pagination.offset)
        .limit(pagination.limit)
        .all()
    )
    return {
        "data": resources,
        "pagination": pagination_meta(pagination.page, pagination.limit, total),
    }


@router.post(
    "/resources",
    response_model=ResourceOut,
    status_code=status.HTTP_201_CREATED,
    dependencies=write_guards,
)
def create_resource(
    payload: ResourceCreate,
    db: Session = Depends(get_db),
    user: User = Depends(require_auth),
):
    values = transform_resource_from_api(payload.model_dump(by_alias=True, exclude={"lessons"}))
    resource = Resource(teacher_id=user.id, **values)
    db.add(resource)
    try:
        attach_lessons(db, resource, payload.lessons or [], user)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(resource)
    return resource


@router.get("/resources/{resource_id}", response_model=ResourceOut, dependencies=read_guards)
def get_resource(resource_id: str, db: Session = Depends(get_db), user: User = Depends(require_auth)):
    return get_owned_resource(db, resource_id, user)


@router.put("/resources/{resource_id}", response_model=ResourceOut, dependencies=write_guards)
def update_resource(
    resource_id: str,
    payload: ResourceUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(require_auth),
):
    resource = get_owned_resource(db, resource_id, user)
    values = transform_resource_from_api(payload.model_dump(by_alias=True, exclude_unset=True, exclude={"lessons"}))
    try:
        for key, value in values.items():
            if value is None and key == "resource_name":
                continue
            setattr(resource, key, value)
        if payload.lessons is not None:
            clear_lessons(db, resource)
            attach_lessons(db, resource, payload.lessons, user)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(resource)
    return resource


@router.delete("/resources/{resource_id}", response_model=MessageOut, dependencies=write_guards)
def delete_resource(resource_id: str, db: Session = Depends(get_db), user: User = Depends(require_auth)):
    resource = get_owned_resource(db, resource_id, user)
    db.delete(resource)
    db.commit()
    return {"message": "Kaynak silindi"}
