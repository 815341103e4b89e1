from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session, joinedload
import logging

from ...core.database import get_db
from ...core.security import TokenPayload
from ...api.deps import get_admin_token
from ...models.announcement import Announcement
from ...schemas.announcement import AnnouncementCreate, AnnouncementResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/announcements", tags=["Announcements"])


def _get_announcement(db: Session, announcement_id: int) -> Announcement:
    announcement = db.get(Announcement, announcement_id)
    if not announcement:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Announcement not found"
        )
    return announcement


@router.get("", response_model=List[AnnouncementResponse])
async def list_announcements(db: Session = Depends(get_db)):
    """Newest announcements first."""
    return (
        db.query(Announcement)
        .options(joinedload(Announcement.author))
        .order_by(Announcement.created_at.desc(), Announcement.id.desc())
        .all()
    )


@router.get("/{announcement_id}", response_model=AnnouncementResponse)
async def get_announcement(announcement_id: int, db: Session = Depends(get_db)):
    return _get_announcement(db, announcement_id)


@router.post("", response_model=AnnouncementResponse, status_code=status.HTTP_201_CREATED)
async def create_announcement(
    announcement_data: AnnouncementCreate,
    db: Session = Depends(get_db),
    token_payload: TokenPayload = Depends(get_admin_token)
):
    announcement = Announcement(
        **announcement_data.model_dump(),
        created_by=token_payload.principal_id
    )
    db.add(announcement)
    db.commit()
    db.refresh(announcement)

    logger.info(f"Announcement {announcement.id} posted by admin {announcement.created_by}")
    return announcement


@router.put("/{announcement_id}", response_model=AnnouncementResponse)
async def update_announcement(
    announcement_id: int,
    announcement_data: AnnouncementCreate,
    db: Session = Depends(get_db),
    _: TokenPayload = Depends(get_admin_token)
):
    announcement = _get_announcement(db, announcement_id)
    announcement.title = announcement_data.title
    announcement.description = announcement_data.description
    db.commit()
    db.refresh(announcement)
    return announcement


@router.delete("/{announcement_id}")
async def delete_announcement(
    announcement_id: int,
    db: Session = Depends(get_db),
    _: TokenPayload = Depends(get_admin_token)
):
    db.delete(_get_announcement(db, announcement_id))
    db.commit()
    return {"message": "Announcement deleted successfully"}
