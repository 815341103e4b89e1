from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...core.security import TokenPayload
from ...api.deps import get_admin_token
from ...services.admin_service import AdminService
from ...schemas.account import AdminResponse, AdminUpdate

router = APIRouter(prefix="/admins", tags=["Admins"])


@router.get("/{admin_id}/profile", response_model=AdminResponse)
async def get_admin_profile(
    admin_id: int,
    db: Session = Depends(get_db),
    _: TokenPayload = Depends(get_admin_token)
):
    return AdminService(db).get(admin_id)


@router.put("/{admin_id}/profile", response_model=AdminResponse)
async def update_admin_profile(
    admin_id: int,
    admin_data: AdminUpdate,
    db: Session = Depends(get_db),
    _: TokenPayload = Depends(get_admin_token)
):
    return AdminService(db).update_profile(admin_id, admin_data)
