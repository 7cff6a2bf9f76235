import logging
from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.api.deps import ADMIN_ROLES, get_allocation_store, get_current_user, get_db, require_roles
from app.core.exceptions import ConfirmationRequiredError, ResourceNotFoundError, ScheduleConflictError
from app.models.allocation import SEMESTERS, WEEKDAYS, ComplementaryAllocation
from app.models.professional import Professional
from app.models.school_class import SchoolClass
from app.models.subject import Subject
from app.models.time_slot import TimeSlot
from app.models.user import User
from app.schemas.schedule import (
    ClassAllocationIn,
    ClassAllocationOut,
    ComplementaryAllocationIn,
    ComplementaryAllocationOut,
    ComplementaryAllocationUpdate,
    ScheduleConflictOut,
    SemesterCopyRequest,
    SemesterCopyResult,
    SlotAvailabilityOut,
    TeacherWeekEntryOut,
)
from app.services.allocation_store import AllocationRecord, AllocationStore, ComplementaryRecord, records_for_semesters
from app.services.audit import log_activity
from app.services.conflict_detector import ActivityCandidate, AllocationCandidate, ConflictDetector
from app.services.institution import get_or_create_settings
from app.services.time_grid import list_time_slots, visible_slots

router = APIRouter()
logger = logging.getLogger(__name__)


def _require(db: Session, model, record_id: str | None, label: str) -> None:
    if record_id is not None and db.get(model, record_id) is None:
        raise ResourceNotFoundError(label, record_id)


def _validate_semesters(semesters: list[str]) -> list[str]:
    invalid = [value for value in semesters if value not in SEMESTERS]
    if invalid:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Invalid semester: {', '.join(invalid)}")
    return sorted(set(semesters))


def _conflicts_for(
    db: Session, store: AllocationStore, payload: ClassAllocationIn
) -> tuple[ConflictDetector, list]:
    store.refresh(payload.year)
    allocations, complementary = store.for_semesters(payload.semesters)
    detector = ConflictDetector.from_session(db)
    candidate = AllocationCandidate(
        class_id=payload.class_id,
        day_of_week=payload.day_of_week,
        time_slot_id=payload.time_slot_id,
        year=payload.year,
        semesters=tuple(payload.semesters),
        teacher_id=payload.teacher_id,
    )
    return detector, detector.detect(candidate, allocations, complementary)


@router.get("/schedule/classes/{class_id}", response_model=list[ClassAllocationOut])
def get_class_schedule(
    class_id: str,
    year: str = Query(pattern=r"^\d{4}$"),
    semesters: list[str] = Query(default=["1"]),
    current_user: User = Depends(get_current_user),
    store: AllocationStore = Depends(get_allocation_store),
) -> list[ClassAllocationOut]:
    return [asdict(item) for item in store.class_grid(class_id, year, _validate_semesters(semesters))]


@router.post("/schedule/conflicts/check", response_model=list[ScheduleConflictOut])
def check_class_allocation(
    payload: ClassAllocationIn,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    store: AllocationStore = Depends(get_allocation_store),
) -> list[ScheduleConflictOut]:
    _, conflicts = _conflicts_for(db, store, payload)
    return [conflict.to_dict() for conflict in conflicts]


@router.post("/schedule/class-allocations", response_model=list[ClassAllocationOut])
def save_class_allocation(
    payload: ClassAllocationIn,
    current_user: User = Depends(require_roles(*ADMIN_ROLES)),
    db: Session = Depends(get_db),
    store: AllocationStore = Depends(get_allocation_store),
) -> list[ClassAllocationOut]:
    _require(db, SchoolClass, payload.class_id, "Class")
    _require(db, Subject, payload.subject_id, "Subject")
    _require(db, TimeSlot, payload.time_slot_id, "Time slot")
    _require(db, Professional, payload.teacher_id, "Teacher")

    detector, conflicts = _conflicts_for(db, store, payload)
    if conflicts:
        message = detector.conflict_message(conflicts, class_id=payload.class_id, time_slot_id=payload.time_slot_id)
        logger.info(
            "Rejected allocation of teacher %s in class %s: %d conflict(s)",
            payload.teacher_id,
            payload.class_id,
            len(conflicts),
        )
        raise ScheduleConflictError(message, [conflict.to_dict() for conflict in conflicts])

    template = AllocationRecord(
        id=None,
        class_id=payload.class_id,
        subject_id=payload.subject_id,
        time_slot_id=payload.time_slot_id,
        day_of_week=payload.day_of_week,
        year=payload.year,
        semester=payload.semesters[0],
        teacher_id=payload.teacher_id,
        room=payload.room,
    )
    stored = [store.add(record) for record in records_for_semesters(template, payload.semesters)]
    log_activity(
        db,
        user=current_user,
        action="schedule.class_allocation.save",
        entity_type="class_allocation",
        entity_id=stored[0].id,
        details={
            "class_id": payload.class_id,
            "day_of_week": payload.day_of_week,
            "time_slot_id": payload.time_slot_id,
            "year": payload.year,
            "semesters": payload.semesters,
            "teacher_id": payload.teacher_id,
        },
    )
    db.commit()
    return [asdict(item) for item in stored]


@router.delete("/schedule/class-allocations/{allocation_id}")
def delete_class_allocation(
    allocation_id: str,
    current_user: User = Depends(require_roles(*ADMIN_ROLES)),
    db: Session = Depends(get_db),
    store: AllocationStore = Depends(get_allocation_store),
) -> dict:
    removed = store.remove(allocation_id)
    if removed:
        log_activity(
            db,
            user=current_user,
            action="schedule.class_allocation.delete",
            entity_type="class_allocation",
            entity_id=allocation_id,
        )
        db.commit()
    return {"success": True, "removed": removed}


@router.post("/schedule/copy-semester", response_model=SemesterCopyResult)
def copy_semester(
    payload: SemesterCopyRequest,
    current_user: User = Depends(require_roles(*ADMIN_ROLES)),
    db: Session = Depends(get_db),
    store: AllocationStore = Depends(get_allocation_store),
) -> SemesterCopyResult:
    if not payload.confirm:
        raise ConfirmationRequiredError(
            f"Copying semester {payload.source_semester} overwrites every allocation of semester "
            f"{payload.target_semester} for this class; resend with confirm=true"
        )
    _require(db, SchoolClass, payload.class_id, "Class")

    had_target = bool(store.class_grid(payload.class_id, payload.year, [payload.target_semester]))
    copied = store.copy(payload.source_semester, payload.target_semester, payload.year, payload.class_id)
    if copied:
        log_activity(
            db,
            user=current_user,
            action="schedule.copy_semester",
            entity_type="school_class",
            entity_id=payload.class_id,
            details={
                "year": payload.year,
                "source": payload.source_semester,
                "target": payload.target_semester,
                "copied": copied,
            },
        )
        db.commit()
    return SemesterCopyResult(copied=copied, target_had_allocations=had_target)


@router.get("/schedule/complementary", response_model=list[ComplementaryAllocationOut])
def list_complementary(
    year: str = Query(pattern=r"^\d{4}$"),
    semester: str | None = Query(default=None),
    teacher_id: str | None = Query(default=None),
    current_user: User = Depends(get_current_user),
    store: AllocationStore = Depends(get_allocation_store),
) -> list[ComplementaryAllocationOut]:
    store.refresh(year)
    items = store.complementary
    if semester is not None:
        items = [item for item in items if item.semester == semester]
    if teacher_id is not None:
        items = [item for item in items if item.teacher_id == teacher_id]
    return [asdict(item) for item in items]


@router.post(
    "/schedule/complementary",
    response_model=ComplementaryAllocationOut,
    status_code=status.HTTP_201_CREATED,
)
def create_complementary(
    payload: ComplementaryAllocationIn,
    current_user: User = Depends(require_roles(*ADMIN_ROLES)),
    db: Session = Depends(get_db),
    store: AllocationStore = Depends(get_allocation_store),
) -> ComplementaryAllocationOut:
    _require(db, Professional, payload.teacher_id, "Teacher")
    _require(db, TimeSlot, payload.time_slot_id, "Time slot")

    store.refresh(payload.year)
    allocations, complementary = store.for_semesters([payload.semester])
    detector = ConflictDetector.from_session(db)
    candidate = ActivityCandidate(
        teacher_id=payload.teacher_id,
        day_of_week=payload.day_of_week,
        time_slot_id=payload.time_slot_id,
        year=payload.year,
        semester=payload.semester,
    )
    conflicts = detector.detect_activity_conflicts(candidate, allocations, complementary)
    if conflicts:
        message = (
            f"Não é possível registrar a atividade de {detector.teacher_name(payload.teacher_id)}: "
            f"{conflicts[0].description}"
        )
        raise ScheduleConflictError(message, [conflict.to_dict() for conflict in conflicts])

    stored = store.add_complementary(
        ComplementaryRecord(
            id=None,
            teacher_id=payload.teacher_id,
            time_slot_id=payload.time_slot_id,
            day_of_week=payload.day_of_week,
            year=payload.year,
            semester=payload.semester,
            activity=payload.activity,
        )
    )
    log_activity(
        db,
        user=current_user,
        action="schedule.complementary.create",
        entity_type="complementary_allocation",
        entity_id=stored.id,
        details={"teacher_id": payload.teacher_id, "activity": payload.activity},
    )
    db.commit()
    return asdict(stored)


@router.put("/schedule/complementary/{allocation_id}", response_model=ComplementaryAllocationOut)
def update_complementary(
    allocation_id: str,
    payload: ComplementaryAllocationUpdate,
    current_user: User = Depends(require_roles(*ADMIN_ROLES)),
    db: Session = Depends(get_db),
    store: AllocationStore = Depends(get_allocation_store),
) -> ComplementaryAllocationOut:
    row = db.get(ComplementaryAllocation, allocation_id)
    if row is None:
        raise ResourceNotFoundError("Complementary allocation", allocation_id)
    _require(db, TimeSlot, payload.time_slot_id, "Time slot")

    store.refresh(row.year)
    current = store.get_complementary(allocation_id)
    allocations, complementary = store.for_semesters([current.semester])
    detector = ConflictDetector.from_session(db)
    candidate = ActivityCandidate(
        teacher_id=current.teacher_id,
        day_of_week=payload.day_of_week or current.day_of_week,
        time_slot_id=payload.time_slot_id or current.time_slot_id,
        year=current.year,
        semester=current.semester,
        replaces_id=allocation_id,
    )
    conflicts = detector.detect_activity_conflicts(candidate, allocations, complementary)
    if conflicts:
        message = (
            f"Não é possível registrar a atividade de {detector.teacher_name(current.teacher_id)}: "
            f"{conflicts[0].description}"
        )
        raise ScheduleConflictError(message, [conflict.to_dict() for conflict in conflicts])

    stored = store.update_complementary(
        allocation_id,
        payload.activity,
        day_of_week=payload.day_of_week,
        time_slot_id=payload.time_slot_id,
    )
    if stored is None:
        raise ResourceNotFoundError("Complementary allocation", allocation_id)
    log_activity(
        db,
        user=current_user,
        action="schedule.complementary.update",
        entity_type="complementary_allocation",
        entity_id=allocation_id,
        details={"activity": stored.activity},
    )
    db.commit()
    return asdict(stored)


@router.delete("/schedule/complementary/{allocation_id}")
def delete_complementary(
    allocation_id: str,
    current_user: User = Depends(require_roles(*ADMIN_ROLES)),
    db: Session = Depends(get_db),
    store: AllocationStore = Depends(get_allocation_store),
) -> dict:
    removed = store.remove_complementary(allocation_id)
    if removed:
        log_activity(
            db,
            user=current_user,
            action="schedule.complementary.delete",
            entity_type="complementary_allocation",
            entity_id=allocation_id,
        )
        db.commit()
    return {"success": True, "removed": removed}


@router.get("/schedule/availability", response_model=SlotAvailabilityOut)
def get_slot_availability(
    year: str = Query(pattern=r"^\d{4}$"),
    day: str = Query(),
    time_slot_id: str = Query(),
    semesters: list[str] = Query(default=["1"]),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    store: AllocationStore = Depends(get_allocation_store),
) -> SlotAvailabilityOut:
    if day not in WEEKDAYS:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid day_of_week")
    store.refresh(year)
    detector = ConflictDetector.from_session(db)
    availability = detector.slot_availability(
        day=day,
        time_slot_id=time_slot_id,
        year=year,
        semesters=_validate_semesters(semesters),
        allocations=store.allocations,
        complementary=store.complementary,
    )
    return asdict(availability)


@router.get("/schedule/teachers/{teacher_id}/week", response_model=list[TeacherWeekEntryOut])
def get_teacher_week(
    teacher_id: str,
    year: str = Query(pattern=r"^\d{4}$"),
    semester: str = Query(default="1"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    store: AllocationStore = Depends(get_allocation_store),
) -> list[TeacherWeekEntryOut]:
    _require(db, Professional, teacher_id, "Teacher")
    _validate_semesters([semester])
    slots = visible_slots(list_time_slots(db), get_or_create_settings(db).has_night_shift)
    return [asdict(entry) for entry in store.teacher_week(teacher_id, year, semester, [slot.id for slot in slots])]
