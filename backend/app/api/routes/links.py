from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.api.deps import ADMIN_ROLES, get_current_user, get_db, require_roles
from app.models.portal_link import PortalLink
from app.models.user import User
from app.models.user_preference import UserPreference
from app.schemas.link import PortalLinkCreate, PortalLinkOut
from app.services.ordering import apply_saved_order

router = APIRouter()


@router.get("/links", response_model=list[PortalLinkOut])
def list_links(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)) -> list[PortalLinkOut]:
    links = list(db.execute(select(PortalLink).order_by(PortalLink.created_at.asc(), PortalLink.title.asc())).scalars())
    preference = db.get(UserPreference, current_user.id)
    saved_order = preference.link_order if preference is not None else None
    return apply_saved_order(links, saved_order, key=lambda link: link.id)


@router.post("/links", response_model=PortalLinkOut, status_code=status.HTTP_201_CREATED)
def create_link(
    payload: PortalLinkCreate,
    current_user: User = Depends(require_roles(*ADMIN_ROLES)),
    db: Session = Depends(get_db),
) -> PortalLinkOut:
    link = PortalLink(**payload.model_dump())
    db.add(link)
    db.commit()
    db.refresh(link)
    return link


@router.put("/links/{link_id}", response_model=PortalLinkOut)
def update_link(
    link_id: str,
    payload: PortalLinkCreate,
    current_user: User = Depends(require_roles(*ADMIN_ROLES)),
    db: Session = Depends(get_db),
) -> PortalLinkOut:
    link = db.get(PortalLink, link_id)
    if link is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Link not found")
    for key, value in payload.model_dump().items():
        setattr(link, key, value)
    db.commit()
    db.refresh(link)
    return link


@router.delete("/links/{link_id}")
def delete_link(
    link_id: str,
    current_user: User = Depends(require_roles(*ADMIN_ROLES)),
    db: Session = Depends(get_db),
) -> dict:
    link = db.get(PortalLink, link_id)
    if link is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Link not found")
    db.delete(link)
    db.commit()
    return {"success": True}
