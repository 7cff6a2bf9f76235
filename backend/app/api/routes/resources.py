from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.api.deps import ADMIN_ROLES, get_current_user, get_db, require_roles
from app.models.resource import Resource
from app.models.user import User
from app.schemas.resource import ResourceCreate, ResourceOut, ResourceTypeCreate, ResourceTypeOut, ResourceUpdate
from app.services.audit import log_activity
from app.services.change_feed import ChangeEvent, change_feed
from app.services.resources import add_resource_type, list_resource_types

router = APIRouter()

RESOURCE_TABLE = Resource.__tablename__


@router.get("/resources", response_model=list[ResourceOut])
def list_resources(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)) -> list[ResourceOut]:
    return list(db.execute(select(Resource).order_by(Resource.name.asc())).scalars())


@router.get("/resources/{resource_id}", response_model=ResourceOut)
def get_resource(
    resource_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ResourceOut:
    resource = db.get(Resource, resource_id)
    if resource is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Resource not found")
    return resource


@router.post("/resources", response_model=ResourceOut, status_code=status.HTTP_201_CREATED)
def create_resource(
    payload: ResourceCreate,
    current_user: User = Depends(require_roles(*ADMIN_ROLES)),
    db: Session = Depends(get_db),
) -> ResourceOut:
    existing = db.execute(select(Resource).where(Resource.name == payload.name)).scalar_one_or_none()
    if existing:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Resource name already exists")
    resource = Resource(**payload.model_dump())
    db.add(resource)
    db.flush()
    log_activity(
        db,
        user=current_user,
        action="resource.create",
        entity_type="resource",
        entity_id=resource.id,
        details={"name": payload.name, "type": payload.type},
    )
    db.commit()
    db.refresh(resource)
    change_feed.publish(ChangeEvent(table=RESOURCE_TABLE, action="insert", record_id=resource.id))
    return resource


@router.put("/resources/{resource_id}", response_model=ResourceOut)
def update_resource(
    resource_id: str,
    payload: ResourceUpdate,
    current_user: User = Depends(require_roles(*ADMIN_ROLES)),
    db: Session = Depends(get_db),
) -> ResourceOut:
    resource = db.get(Resource, resource_id)
    if resource is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Resource not found")

    data = payload.model_dump(exclude_unset=True)
    if "name" in data:
        existing = db.execute(
            select(Resource).where(Resource.name == data["name"], Resource.id != resource_id)
        ).scalar_one_or_none()
        if existing:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Resource name already exists")

    for key, value in data.items():
        setattr(resource, key, value)
    db.commit()
    db.refresh(resource)
    change_feed.publish(ChangeEvent(table=RESOURCE_TABLE, action="update", record_id=resource.id))
    return resource


@router.delete("/resources/{resource_id}")
def delete_resource(
    resource_id: str,
    current_user: User = Depends(require_roles(*ADMIN_ROLES)),
    db: Session = Depends(get_db),
) -> dict:
    resource = db.get(Resource, resource_id)
    if resource is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Resource not found")
    log_activity(
        db,
        user=current_user,
        action="resource.delete",
        entity_type="resource",
        entity_id=resource_id,
        details={"name": resource.name},
    )
    db.delete(resource)
    db.commit()
    change_feed.publish(ChangeEvent(table=RESOURCE_TABLE, action="delete", record_id=resource_id))
    return {"success": True}


@router.get("/resource-types", response_model=list[ResourceTypeOut])
def get_resource_types(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[ResourceTypeOut]:
    types = list_resource_types(db)
    db.commit()
    return types


@router.post("/resource-types", response_model=ResourceTypeOut)
def create_resource_type(
    payload: ResourceTypeCreate,
    current_user: User = Depends(require_roles(*ADMIN_ROLES)),
    db: Session = Depends(get_db),
) -> ResourceTypeOut:
    resource_type, created = add_resource_type(db, payload.label)
    db.commit()
    if created:
        db.refresh(resource_type)
    return resource_type
