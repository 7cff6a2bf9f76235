from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import ADMIN_ROLES, get_current_user, get_db, require_roles
from app.models.user import User
from app.schemas.calendar import AcademicConfig
from app.schemas.settings import BrandingOut, InstitutionSettingsOut, InstitutionSettingsUpdate
from app.services.audit import log_activity
from app.services.change_feed import ChangeEvent, change_feed
from app.services.institution import get_or_create_settings, load_academic_config, settings_out

router = APIRouter()


@router.get("/settings/branding", response_model=BrandingOut)
def get_branding(db: Session = Depends(get_db)) -> BrandingOut:
    record = get_or_create_settings(db)
    return BrandingOut(
        institution_name=record.institution_name,
        logo_url=record.logo_url,
        lunch_color=record.lunch_color,
        semantic_colors=record.semantic_colors or {},
        has_night_shift=record.has_night_shift,
    )


@router.get("/settings/institution", response_model=InstitutionSettingsOut)
def get_institution_settings(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> InstitutionSettingsOut:
    return settings_out(get_or_create_settings(db))


@router.put("/settings/institution", response_model=InstitutionSettingsOut)
def update_institution_settings(
    payload: InstitutionSettingsUpdate,
    current_user: User = Depends(require_roles(*ADMIN_ROLES)),
    db: Session = Depends(get_db),
) -> InstitutionSettingsOut:
    record = get_or_create_settings(db)
    for key, value in payload.model_dump().items():
        setattr(record, key, value)
    log_activity(
        db,
        user=current_user,
        action="settings.update",
        entity_type="institution_settings",
        entity_id=str(record.id),
        details={"has_night_shift": payload.has_night_shift, "available_weeks": payload.available_weeks},
    )
    db.commit()
    db.refresh(record)
    change_feed.publish(ChangeEvent(table="institution_settings", action="update", record_id=str(record.id)))
    return settings_out(record)


@router.get("/settings/academic-config", response_model=AcademicConfig)
def get_academic_config(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> AcademicConfig:
    return load_academic_config(get_or_create_settings(db))


@router.put("/settings/academic-config", response_model=AcademicConfig)
def update_academic_config(
    payload: AcademicConfig,
    current_user: User = Depends(require_roles(*ADMIN_ROLES)),
    db: Session = Depends(get_db),
) -> AcademicConfig:
    record = get_or_create_settings(db)
    record.academic_config = payload.model_dump(mode="json")
    log_activity(
        db,
        user=current_user,
        action="calendar.academic_config.update",
        entity_type="institution_settings",
        entity_id=str(record.id),
        details={"year": payload.year_config.year},
    )
    db.commit()
    change_feed.publish(ChangeEvent(table="institution_settings", action="update", record_id=str(record.id)))
    return payload
