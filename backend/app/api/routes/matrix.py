from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.api.deps import ADMIN_ROLES, get_current_user, get_db, require_roles
from app.models.professional import TEACHER_KIND, Professional
from app.models.school_class import SchoolClass
from app.models.subject import Subject
from app.models.user import User
from app.schemas.matrix import (
    ProfessionalCreate,
    ProfessionalOut,
    ProfessionalUpdate,
    SchoolClassCreate,
    SchoolClassOut,
    SubjectCreate,
    SubjectOut,
)
from app.services.audit import log_activity

router = APIRouter()


def _commit_or_conflict(db: Session, detail: str) -> None:
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=detail) from exc


@router.get("/classes", response_model=list[SchoolClassOut])
def list_classes(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)) -> list[SchoolClassOut]:
    return list(db.execute(select(SchoolClass).order_by(SchoolClass.series.asc(), SchoolClass.name.asc())).scalars())


@router.post("/classes", response_model=SchoolClassOut, status_code=status.HTTP_201_CREATED)
def create_class(
    payload: SchoolClassCreate,
    current_user: User = Depends(require_roles(*ADMIN_ROLES)),
    db: Session = Depends(get_db),
) -> SchoolClassOut:
    school_class = SchoolClass(**payload.model_dump())
    db.add(school_class)
    _commit_or_conflict(db, "Class already exists")
    db.refresh(school_class)
    return school_class


@router.delete("/classes/{class_id}")
def delete_class(
    class_id: str,
    current_user: User = Depends(require_roles(*ADMIN_ROLES)),
    db: Session = Depends(get_db),
) -> dict:
    school_class = db.get(SchoolClass, class_id)
    if school_class is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Class not found")
    log_activity(
        db,
        user=current_user,
        action="class.delete",
        entity_type="school_class",
        entity_id=class_id,
        details={"name": school_class.display_name},
    )
    db.delete(school_class)
    _commit_or_conflict(db, "Class is still referenced by allocations or bookings")
    return {"success": True}


@router.get("/subjects", response_model=list[SubjectOut])
def list_subjects(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)) -> list[SubjectOut]:
    return list(db.execute(select(Subject).order_by(Subject.name.asc())).scalars())


@router.post("/subjects", response_model=SubjectOut, status_code=status.HTTP_201_CREATED)
def create_subject(
    payload: SubjectCreate,
    current_user: User = Depends(require_roles(*ADMIN_ROLES)),
    db: Session = Depends(get_db),
) -> SubjectOut:
    subject = Subject(name=payload.name)
    db.add(subject)
    _commit_or_conflict(db, "Subject already exists")
    db.refresh(subject)
    return subject


@router.delete("/subjects/{subject_id}")
def delete_subject(
    subject_id: str,
    current_user: User = Depends(require_roles(*ADMIN_ROLES)),
    db: Session = Depends(get_db),
) -> dict:
    subject = db.get(Subject, subject_id)
    if subject is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Subject not found")
    db.delete(subject)
    _commit_or_conflict(db, "Subject is still referenced by allocations or bookings")
    return {"success": True}


@router.get("/professionals", response_model=list[ProfessionalOut])
def list_professionals(
    kind: str | None = Query(default=None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[ProfessionalOut]:
    query = select(Professional).order_by(Professional.name.asc())
    if kind:
        query = query.where(Professional.kind == kind)
    return list(db.execute(query).scalars())


@router.get("/teachers", response_model=list[ProfessionalOut])
def list_teachers(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)) -> list[ProfessionalOut]:
    query = select(Professional).where(Professional.kind == TEACHER_KIND).order_by(Professional.name.asc())
    return list(db.execute(query).scalars())


@router.post("/professionals", response_model=ProfessionalOut, status_code=status.HTTP_201_CREATED)
def create_professional(
    payload: ProfessionalCreate,
    current_user: User = Depends(require_roles(*ADMIN_ROLES)),
    db: Session = Depends(get_db),
) -> ProfessionalOut:
    professional = Professional(**payload.model_dump())
    db.add(professional)
    db.commit()
    db.refresh(professional)
    return professional


@router.put("/professionals/{professional_id}", response_model=ProfessionalOut)
def update_professional(
    professional_id: str,
    payload: ProfessionalUpdate,
    current_user: User = Depends(require_roles(*ADMIN_ROLES)),
    db: Session = Depends(get_db),
) -> ProfessionalOut:
    professional = db.get(Professional, professional_id)
    if professional is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Professional not found")
    for key, value in payload.model_dump(exclude_unset=True).items():
        setattr(professional, key, value)
    db.commit()
    db.refresh(professional)
    return professional


@router.delete("/professionals/{professional_id}")
def delete_professional(
    professional_id: str,
    current_user: User = Depends(require_roles(*ADMIN_ROLES)),
    db: Session = Depends(get_db),
) -> dict:
    professional = db.get(Professional, professional_id)
    if professional is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Professional not found")
    db.delete(professional)
    _commit_or_conflict(db, "Professional is still referenced by bookings or allocations")
    return {"success": True}
