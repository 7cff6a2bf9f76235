from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.api.deps import ADMIN_ROLES, get_current_user, get_db, require_roles
from app.core.config import get_settings
from app.models.time_slot import TimeSlot
from app.models.user import User
from app.schemas.common import parse_time_to_minutes
from app.schemas.time_slot import TimeSlotCreate, TimeSlotOut, TimeSlotUpdate
from app.services.audit import log_activity
from app.services.change_feed import ChangeEvent, change_feed
from app.services.institution import get_or_create_settings
from app.services.time_grid import ensure_default_time_grid, list_time_slots, visible_slots

router = APIRouter()
settings = get_settings()


@router.get("/time-slots", response_model=list[TimeSlotOut])
def get_time_slots(
    include_night: bool = Query(default=False),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[TimeSlotOut]:
    if settings.seed_default_time_grid:
        slots = ensure_default_time_grid(db)
        db.commit()
    else:
        slots = list_time_slots(db)
    if include_night:
        return slots
    return visible_slots(slots, get_or_create_settings(db).has_night_shift)


@router.post("/time-slots", response_model=TimeSlotOut, status_code=status.HTTP_201_CREATED)
def create_time_slot(
    payload: TimeSlotCreate,
    current_user: User = Depends(require_roles(*ADMIN_ROLES)),
    db: Session = Depends(get_db),
) -> TimeSlotOut:
    data = payload.model_dump()
    if data["position"] is None:
        data["position"] = (db.execute(select(func.max(TimeSlot.position))).scalar() or 0) + 1
    slot = TimeSlot(**data)
    db.add(slot)
    db.commit()
    db.refresh(slot)
    change_feed.publish(ChangeEvent(table=TimeSlot.__tablename__, action="insert", record_id=slot.id))
    return slot


@router.put("/time-slots/{slot_id}", response_model=TimeSlotOut)
def update_time_slot(
    slot_id: str,
    payload: TimeSlotUpdate,
    current_user: User = Depends(require_roles(*ADMIN_ROLES)),
    db: Session = Depends(get_db),
) -> TimeSlotOut:
    slot = db.get(TimeSlot, slot_id)
    if slot is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Time slot not found")

    data = payload.model_dump(exclude_unset=True, exclude_none=True)
    start = data.get("start_time", slot.start_time)
    end = data.get("end_time", slot.end_time)
    if parse_time_to_minutes(end) <= parse_time_to_minutes(start):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="end_time must be after start_time")

    for key, value in data.items():
        setattr(slot, key, value)
    if data:
        log_activity(
            db,
            user=current_user,
            action="time_slot.update",
            entity_type="time_slot",
            entity_id=slot.id,
            details={key: getattr(value, "value", value) for key, value in data.items()},
        )
    db.commit()
    db.refresh(slot)
    change_feed.publish(ChangeEvent(table=TimeSlot.__tablename__, action="update", record_id=slot.id))
    return slot


@router.post("/time-slots/seed-defaults", response_model=list[TimeSlotOut])
def seed_default_time_slots(
    current_user: User = Depends(require_roles(*ADMIN_ROLES)),
    db: Session = Depends(get_db),
) -> list[TimeSlotOut]:
    slots = ensure_default_time_grid(db)
    db.commit()
    return slots
