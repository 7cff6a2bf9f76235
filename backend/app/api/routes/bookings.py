import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.api.deps import get_booking_ledger, get_current_user, get_db
from app.core.exceptions import ResourceNotFoundError
from app.models.professional import Professional
from app.models.resource import Resource
from app.models.school_class import SchoolClass
from app.models.subject import Subject
from app.models.time_slot import TimeSlot
from app.models.user import User
from app.schemas.booking import BookingCreate, BookingOut, BookingUpdate, WeekBookingsOut
from app.services.audit import log_activity
from app.services.booking_ledger import ResourceBookingLedger, WeekWindow, is_booking_manager, week_window
from app.services.institution import get_or_create_settings

router = APIRouter()
logger = logging.getLogger(__name__)


def _require(db: Session, model, record_id: str | None, label: str) -> None:
    if record_id is not None and db.get(model, record_id) is None:
        raise ResourceNotFoundError(label, record_id)


def _bookable_range(db: Session, today: date) -> WeekWindow:
    """From this week's Monday to the Friday of the last open week."""
    weeks = get_or_create_settings(db).available_weeks
    return WeekWindow(start=week_window(today).start, end=week_window(today, weeks - 1).end)


@router.get("/resources/{resource_id}/bookings", response_model=WeekBookingsOut)
def list_week_bookings(
    resource_id: str,
    week_offset: int = Query(default=0, ge=-52, le=52),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    ledger: ResourceBookingLedger = Depends(get_booking_ledger),
) -> WeekBookingsOut:
    _require(db, Resource, resource_id, "Resource")
    window = week_window(date.today(), week_offset)
    bookings = ledger.list_for_week(resource_id, window.start, window.end)
    return WeekBookingsOut(
        resource_id=resource_id,
        week_offset=week_offset,
        week_start=window.start,
        week_end=window.end,
        days=window.days,
        read_only=week_offset < 0,
        bookings=bookings,
    )


@router.post("/resources/{resource_id}/bookings", response_model=BookingOut, status_code=status.HTTP_201_CREATED)
def create_booking(
    resource_id: str,
    payload: BookingCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    ledger: ResourceBookingLedger = Depends(get_booking_ledger),
) -> BookingOut:
    _require(db, Resource, resource_id, "Resource")
    _require(db, TimeSlot, payload.time_slot_id, "Time slot")
    _require(db, SchoolClass, payload.class_id, "Class")
    _require(db, Subject, payload.subject_id, "Subject")

    if is_booking_manager(current_user):
        professional_id = payload.professional_id or current_user.professional_id
        if professional_id is None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="professional_id is required")
    else:
        # Teachers always book for themselves.
        professional_id = current_user.professional_id
        if professional_id is None:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Account is not linked to a professional profile",
            )
    _require(db, Professional, professional_id, "Professional")

    bookable = _bookable_range(db, date.today())
    if not bookable.contains(payload.date):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Bookings are open from {bookable.start.isoformat()} to {bookable.end.isoformat()}",
        )
    if payload.date.weekday() > 4:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Bookings are only allowed on school days")

    booking = ledger.create(
        resource_id=resource_id,
        time_slot_id=payload.time_slot_id,
        booking_date=payload.date,
        class_id=payload.class_id,
        subject_id=payload.subject_id,
        professional_id=professional_id,
        description=payload.description,
    )
    log_activity(
        db,
        user=current_user,
        action="booking.create",
        entity_type="resource_booking",
        entity_id=booking.id,
        details={"resource_id": resource_id, "date": payload.date.isoformat(), "time_slot_id": payload.time_slot_id},
    )
    db.commit()
    return booking


@router.put("/bookings/{booking_id}", response_model=BookingOut)
def update_booking(
    booking_id: str,
    payload: BookingUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    ledger: ResourceBookingLedger = Depends(get_booking_ledger),
) -> BookingOut:
    changes = payload.model_dump(exclude_unset=True)
    _require(db, SchoolClass, changes.get("class_id"), "Class")
    _require(db, Subject, changes.get("subject_id"), "Subject")
    _require(db, Professional, changes.get("professional_id"), "Professional")
    for key in ("class_id", "subject_id", "professional_id"):
        if key in changes and changes[key] is None:
            changes.pop(key)

    booking = ledger.update(booking_id, changes, current_user)
    log_activity(
        db,
        user=current_user,
        action="booking.update",
        entity_type="resource_booking",
        entity_id=booking_id,
        details={key: value for key, value in changes.items() if isinstance(value, str) or value is None},
    )
    db.commit()
    return booking


@router.delete("/bookings/{booking_id}")
def delete_booking(
    booking_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    ledger: ResourceBookingLedger = Depends(get_booking_ledger),
) -> dict:
    ledger.delete(booking_id, current_user)
    log_activity(
        db,
        user=current_user,
        action="booking.delete",
        entity_type="resource_booking",
        entity_id=booking_id,
    )
    db.commit()
    return {"success": True}
