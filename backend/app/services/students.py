from __future__ import annotations

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from app.models.school_class import SchoolClass
from app.models.student import Student
from app.models.user import User
from app.schemas.student import StudentCreate, StudentOut, StudentUpdate
from app.services.ordering import apply_saved_order

SYSTEM_ACTOR = "Sistema"


def actor_label(user: User | None) -> str:
    if user is None:
        return SYSTEM_ACTOR
    return user.name or user.email or SYSTEM_ACTOR


def _apply_payload(student: Student, payload: StudentCreate | StudentUpdate) -> None:
    data = payload.model_dump(mode="json")
    student.name = data["name"]
    student.enrollment_id = data["enrollment_id"]
    student.class_id = data["class_id"]
    student.pdt_id = data["pdt_id"]
    student.status = data["status"]
    student.photo_url = data["photo_url"]
    student.diagnosis = data["diagnosis"]
    student.pcd_profile = data["pcd_profile"]
    student.attachments = data["attachments"]


def build_student(payload: StudentCreate, actor: User | None) -> Student:
    student = Student()
    _apply_payload(student, payload)
    student.created_by = actor_label(actor)
    student.created_by_id = actor.id if actor is not None else None
    return student


def apply_student_update(student: Student, payload: StudentUpdate, actor: User | None) -> None:
    """Replaces the record; creation metadata is never touched."""
    _apply_payload(student, payload)
    student.updated_by = actor_label(actor)
    student.updated_by_id = actor.id if actor is not None else None


def search_students(db: Session, query: str | None = None) -> list[Student]:
    statement = select(Student).outerjoin(SchoolClass, SchoolClass.id == Student.class_id)
    term = (query or "").strip()
    if term:
        pattern = f"%{term}%"
        statement = statement.where(
            or_(
                Student.name.ilike(pattern),
                Student.enrollment_id.ilike(pattern),
                Student.status.ilike(pattern),
                SchoolClass.name.ilike(pattern),
                SchoolClass.series.ilike(pattern),
            )
        )
    return list(db.execute(statement.order_by(Student.name.asc())).unique().scalars())


def ordered_students(students: list[Student], saved_order: list[str] | None) -> list[Student]:
    return apply_saved_order(students, saved_order, key=lambda item: item.id)


def student_out(student: Student) -> StudentOut:
    return StudentOut(
        id=student.id,
        name=student.name,
        enrollment_id=student.enrollment_id,
        class_id=student.class_id,
        pdt_id=student.pdt_id,
        status=student.status,
        photo_url=student.photo_url,
        diagnosis=student.diagnosis,
        pcd_profile=student.pcd_profile or {},
        attachments=student.attachments or [],
        class_name=student.school_class.display_name if student.school_class is not None else None,
        pdt_name=student.pdt.display_name if student.pdt is not None else None,
        attachments_count=len(student.attachments or []),
        created_by=student.created_by,
        created_by_id=student.created_by_id,
        updated_by=student.updated_by,
        updated_by_id=student.updated_by_id,
        created_at=student.created_at,
        updated_at=student.updated_at,
    )
