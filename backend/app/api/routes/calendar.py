from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.api.deps import ADMIN_ROLES, get_current_user, get_db, require_roles
from app.core.exceptions import ConfirmationRequiredError
from app.models.calendar_event import CalendarEvent
from app.models.user import User
from app.schemas.calendar import CalendarEventCreate, CalendarEventOut, CalendarEventUpdate, CalendarResetRequest
from app.services.academic_calendar import (
    RESET_CONFIRMATION_PHRASE,
    clear_manual_events,
    is_system_event_id,
    list_manual_events,
    merged_events,
)
from app.services.audit import log_activity
from app.services.change_feed import ChangeEvent, change_feed
from app.services.institution import get_or_create_settings, load_academic_config

router = APIRouter()

CALENDAR_TABLE = CalendarEvent.__tablename__


def _get_manual_event(db: Session, event_id: str) -> CalendarEvent:
    if is_system_event_id(event_id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="System events are derived from the academic configuration and cannot be edited",
        )
    event = db.get(CalendarEvent, event_id)
    if event is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Calendar event not found")
    return event


@router.get("/calendar/events", response_model=list[CalendarEventOut])
def list_calendar_events(
    start: date | None = Query(default=None),
    end: date | None = Query(default=None),
    include_system: bool = Query(default=True),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[CalendarEventOut]:
    manual = list_manual_events(db, start=start, end=end)
    config = load_academic_config(get_or_create_settings(db)) if include_system else None
    return merged_events(config, manual, start=start, end=end)


@router.post("/calendar/events", response_model=CalendarEventOut, status_code=status.HTTP_201_CREATED)
def create_calendar_event(
    payload: CalendarEventCreate,
    current_user: User = Depends(require_roles(*ADMIN_ROLES)),
    db: Session = Depends(get_db),
) -> CalendarEventOut:
    event = CalendarEvent(**payload.model_dump())
    db.add(event)
    db.flush()
    log_activity(
        db,
        user=current_user,
        action="calendar.event.create",
        entity_type="calendar_event",
        entity_id=event.id,
        details={"date": payload.date.isoformat(), "title": payload.title, "type": payload.type},
    )
    db.commit()
    db.refresh(event)
    change_feed.publish(ChangeEvent(table=CALENDAR_TABLE, action="insert", record_id=event.id))
    return event


@router.put("/calendar/events/{event_id}", response_model=CalendarEventOut)
def update_calendar_event(
    event_id: str,
    payload: CalendarEventUpdate,
    current_user: User = Depends(require_roles(*ADMIN_ROLES)),
    db: Session = Depends(get_db),
) -> CalendarEventOut:
    event = _get_manual_event(db, event_id)
    data = payload.model_dump(exclude_unset=True)
    for key, value in data.items():
        if value is not None or key == "description":
            setattr(event, key, value)
    log_activity(
        db,
        user=current_user,
        action="calendar.event.update",
        entity_type="calendar_event",
        entity_id=event_id,
    )
    db.commit()
    db.refresh(event)
    change_feed.publish(ChangeEvent(table=CALENDAR_TABLE, action="update", record_id=event_id))
    return event


@router.delete("/calendar/events/{event_id}")
def delete_calendar_event(
    event_id: str,
    current_user: User = Depends(require_roles(*ADMIN_ROLES)),
    db: Session = Depends(get_db),
) -> dict:
    event = _get_manual_event(db, event_id)
    log_activity(
        db,
        user=current_user,
        action="calendar.event.delete",
        entity_type="calendar_event",
        entity_id=event_id,
        details={"title": event.title, "date": event.date.isoformat()},
    )
    db.delete(event)
    db.commit()
    change_feed.publish(ChangeEvent(table=CALENDAR_TABLE, action="delete", record_id=event_id))
    return {"success": True}


@router.post("/calendar/reset")
def reset_calendar(
    payload: CalendarResetRequest,
    current_user: User = Depends(require_roles(*ADMIN_ROLES)),
    db: Session = Depends(get_db),
) -> dict:
    if payload.confirmation_phrase.strip() != RESET_CONFIRMATION_PHRASE:
        raise ConfirmationRequiredError(f'Type "{RESET_CONFIRMATION_PHRASE}" to confirm the reset')
    removed = clear_manual_events(db)
    log_activity(
        db,
        user=current_user,
        action="calendar.reset",
        entity_type="calendar_event",
        details={"removed": removed},
    )
    db.commit()
    change_feed.publish(ChangeEvent(table=CALENDAR_TABLE, action="delete", payload={"reset": True}))
    return {"success": True, "removed": removed}
