from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_db, require_roles
from app.models.professional import Professional
from app.models.school_class import SchoolClass
from app.models.student import Student
from app.models.user import User, UserRole
from app.models.user_preference import UserPreference
from app.schemas.student import StudentCreate, StudentOut, StudentUpdate
from app.services.audit import log_activity
from app.services.students import apply_student_update, build_student, ordered_students, search_students, student_out

router = APIRouter()

STUDENT_EDITOR_ROLES = (UserRole.admin, UserRole.coordinator, UserRole.teacher)


def _validate_links(db: Session, payload: StudentCreate | StudentUpdate) -> None:
    if payload.class_id and db.get(SchoolClass, payload.class_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Class not found")
    if payload.pdt_id and db.get(Professional, payload.pdt_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="PDT professional not found")


def _get_student(db: Session, student_id: str) -> Student:
    student = db.get(Student, student_id)
    if student is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Student not found")
    return student


@router.get("/students", response_model=list[StudentOut])
def list_students(
    q: str | None = Query(default=None, max_length=200),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[StudentOut]:
    preference = db.get(UserPreference, current_user.id)
    saved_order = preference.student_order if preference is not None else None
    students = ordered_students(search_students(db, q), saved_order)
    return [student_out(student) for student in students]


@router.get("/students/{student_id}", response_model=StudentOut)
def get_student(
    student_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> StudentOut:
    return student_out(_get_student(db, student_id))


@router.post("/students", response_model=StudentOut, status_code=status.HTTP_201_CREATED)
def create_student(
    payload: StudentCreate,
    current_user: User = Depends(require_roles(*STUDENT_EDITOR_ROLES)),
    db: Session = Depends(get_db),
) -> StudentOut:
    _validate_links(db, payload)
    existing = db.execute(select(Student).where(Student.enrollment_id == payload.enrollment_id)).scalar_one_or_none()
    if existing:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Enrollment id already registered")

    student = build_student(payload, current_user)
    db.add(student)
    try:
        db.flush()
    except IntegrityError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Enrollment id already registered") from exc
    log_activity(
        db,
        user=current_user,
        action="student.create",
        entity_type="student",
        entity_id=student.id,
        details={"name": student.name, "enrollment_id": student.enrollment_id},
    )
    db.commit()
    db.refresh(student)
    return student_out(student)


@router.put("/students/{student_id}", response_model=StudentOut)
def update_student(
    student_id: str,
    payload: StudentUpdate,
    current_user: User = Depends(require_roles(*STUDENT_EDITOR_ROLES)),
    db: Session = Depends(get_db),
) -> StudentOut:
    student = _get_student(db, student_id)
    _validate_links(db, payload)
    duplicate = db.execute(
        select(Student).where(Student.enrollment_id == payload.enrollment_id, Student.id != student_id)
    ).scalar_one_or_none()
    if duplicate:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Enrollment id already registered")

    apply_student_update(student, payload, current_user)
    log_activity(
        db,
        user=current_user,
        action="student.update",
        entity_type="student",
        entity_id=student_id,
        details={"status": student.status},
    )
    db.commit()
    db.refresh(student)
    return student_out(student)


@router.delete("/students/{student_id}")
def delete_student(
    student_id: str,
    current_user: User = Depends(require_roles(UserRole.admin, UserRole.coordinator)),
    db: Session = Depends(get_db),
) -> dict:
    student = _get_student(db, student_id)
    log_activity(
        db,
        user=current_user,
        action="student.delete",
        entity_type="student",
        entity_id=student_id,
        details={"name": student.name},
    )
    db.delete(student)
    db.commit()
    return {"success": True}
