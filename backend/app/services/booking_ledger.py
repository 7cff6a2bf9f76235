"""Dated resource bookings and the Monday to Friday week windows they are listed in."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import PermissionDeniedError, ResourceNotFoundError, SlotAlreadyTakenError, StoreError
from app.models.booking import ResourceBooking
from app.models.time_slot import TimeSlot
from app.models.user import BOOKING_MANAGER_ROLES, User
from app.services.change_feed import ChangeEvent, ChangeFeed

logger = logging.getLogger(__name__)

BOOKING_TABLE = ResourceBooking.__tablename__
BOOKING_UNIQUE_CONSTRAINT = "uq_resource_bookings_cell"
SCHOOL_DAYS = 5


@dataclass(frozen=True)
class WeekWindow:
    start: date  # Monday
    end: date  # Friday

    @property
    def days(self) -> list[date]:
        return [self.start + timedelta(days=offset) for offset in range(SCHOOL_DAYS)]

    def contains(self, value: date) -> bool:
        return self.start <= value <= self.end


def week_window(reference: date, offset: int = 0) -> WeekWindow:
    monday = reference - timedelta(days=reference.weekday()) + timedelta(weeks=offset)
    return WeekWindow(start=monday, end=monday + timedelta(days=SCHOOL_DAYS - 1))


def is_booking_manager(user: User) -> bool:
    return user.role in BOOKING_MANAGER_ROLES


def can_modify_booking(user: User, booking: ResourceBooking) -> bool:
    if is_booking_manager(user):
        return True
    return user.professional_id is not None and user.professional_id == booking.professional_id


def _is_unique_violation(exc: IntegrityError) -> bool:
    orig = exc.orig
    if getattr(orig, "sqlstate", None) == "23505" or getattr(orig, "pgcode", None) == "23505":
        return True
    text = str(orig).lower()
    return "unique" in text or BOOKING_UNIQUE_CONSTRAINT in text


class ResourceBookingLedger:
    """Dated bookings of physical resources, one per (resource, slot, date).

    Double booking is rejected by the database constraint, not by a read
    before the write, so two racing requests cannot both succeed.
    """

    def __init__(self, db: Session, *, feed: ChangeFeed | None = None):
        self.db = db
        self.feed = feed

    def _publish(self, action: str, booking_id: str, resource_id: str) -> None:
        if self.feed is not None:
            self.feed.publish(
                ChangeEvent(table=BOOKING_TABLE, action=action, record_id=booking_id, payload={"resource_id": resource_id})
            )

    def list_for_week(self, resource_id: str, week_start: date, week_end: date) -> list[ResourceBooking]:
        try:
            return list(
                self.db.execute(
                    select(ResourceBooking)
                    .join(TimeSlot, TimeSlot.id == ResourceBooking.time_slot_id)
                    .where(
                        ResourceBooking.resource_id == resource_id,
                        ResourceBooking.date >= week_start,
                        ResourceBooking.date <= week_end,
                    )
                    .order_by(ResourceBooking.date.asc(), TimeSlot.position.asc())
                ).scalars()
            )
        except SQLAlchemyError as exc:
            logger.exception("Error fetching bookings for resource %s", resource_id)
            raise StoreError("Unable to load bookings") from exc

    def get(self, booking_id: str) -> ResourceBooking:
        booking = self.db.get(ResourceBooking, booking_id)
        if booking is None:
            raise ResourceNotFoundError("Booking", booking_id)
        return booking

    def create(
        self,
        *,
        resource_id: str,
        time_slot_id: str,
        booking_date: date,
        class_id: str,
        subject_id: str,
        professional_id: str,
        description: str | None = None,
    ) -> ResourceBooking:
        booking = ResourceBooking(
            resource_id=resource_id,
            time_slot_id=time_slot_id,
            date=booking_date,
            class_id=class_id,
            subject_id=subject_id,
            professional_id=professional_id,
            description=description or None,
        )
        try:
            self.db.add(booking)
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            if _is_unique_violation(exc):
                logger.info(
                    "Booking rejected: resource %s slot %s on %s already taken",
                    resource_id,
                    time_slot_id,
                    booking_date.isoformat(),
                )
                raise SlotAlreadyTakenError(
                    details={
                        "resource_id": resource_id,
                        "time_slot_id": time_slot_id,
                        "date": booking_date.isoformat(),
                    }
                ) from exc
            logger.exception("Error saving booking")
            raise StoreError("Erro ao salvar agendamento") from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Error saving booking")
            raise StoreError("Erro ao salvar agendamento") from exc

        self.db.refresh(booking)
        self._publish("insert", booking.id, resource_id)
        return booking

    def update(self, booking_id: str, changes: dict, actor: User) -> ResourceBooking:
        booking = self.get(booking_id)
        if not can_modify_booking(actor, booking):
            raise PermissionDeniedError("Only the booking owner or an administrator can edit it")
        if "professional_id" in changes and not is_booking_manager(actor):
            changes = {key: value for key, value in changes.items() if key != "professional_id"}

        for key, value in changes.items():
            setattr(booking, key, value)
        try:
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Error updating booking %s", booking_id)
            raise StoreError("Erro ao atualizar agendamento") from exc

        self.db.refresh(booking)
        self._publish("update", booking.id, booking.resource_id)
        return booking

    def delete(self, booking_id: str, actor: User) -> None:
        booking = self.get(booking_id)
        if not can_modify_booking(actor, booking):
            raise PermissionDeniedError("Only the booking owner or an administrator can remove it")
        resource_id = booking.resource_id
        try:
            self.db.delete(booking)
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Error deleting booking %s", booking_id)
            raise StoreError("Erro ao excluir agendamento") from exc

        self._publish("delete", booking_id, resource_id)
