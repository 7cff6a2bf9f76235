from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_db
from app.models.user import User
from app.models.user_preference import UserPreference
from app.schemas.preferences import PreferencesOut, PreferencesUpdate

router = APIRouter()


@router.get("/preferences", response_model=PreferencesOut)
def get_preferences(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)) -> PreferencesOut:
    preference = db.get(UserPreference, current_user.id)
    if preference is None:
        return PreferencesOut()
    return PreferencesOut(link_order=preference.link_order or [], student_order=preference.student_order or [])


@router.put("/preferences", response_model=PreferencesOut)
def update_preferences(
    payload: PreferencesUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> PreferencesOut:
    preference = db.get(UserPreference, current_user.id)
    if preference is None:
        preference = UserPreference(user_id=current_user.id, link_order=[], student_order=[])
        db.add(preference)
    if payload.link_order is not None:
        preference.link_order = list(dict.fromkeys(payload.link_order))
    if payload.student_order is not None:
        preference.student_order = list(dict.fromkeys(payload.student_order))
    db.commit()
    db.refresh(preference)
    return PreferencesOut(link_order=preference.link_order, student_order=preference.student_order)
