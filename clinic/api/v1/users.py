from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...core.security import TokenPayload, UserRole, AuthorizationError
from ...api.deps import get_admin_token, get_current_user_token, ensure_self_or_staff
from ...models.user import User
from ...schemas.account import UserResponse, UserUpdate

router = APIRouter(prefix="/users", tags=["Users"])


def _get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )
    return user


@router.get("", response_model=List[UserResponse])
async def list_users(
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    _: TokenPayload = Depends(get_admin_token)
):
    """List all patient accounts (admin only)."""
    return db.query(User).order_by(User.id).offset(skip).limit(limit).all()


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: int,
    db: Session = Depends(get_db),
    token_payload: TokenPayload = Depends(get_current_user_token)
):
    ensure_self_or_staff(token_payload, user_id)
    return _get_user(db, user_id)


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: int,
    user_data: UserUpdate,
    db: Session = Depends(get_db),
    token_payload: TokenPayload = Depends(get_current_user_token)
):
    """Edit a patient profile (the patient themself or an admin)."""
    if token_payload.role != UserRole.ADMIN and token_payload.principal_id != user_id:
        raise AuthorizationError("You can only edit your own profile")

    user = _get_user(db, user_id)
    changes = user_data.model_dump(exclude_unset=True, exclude_none=True)

    if "email" in changes and changes["email"] != user.email:
        if db.query(User).filter(User.email == changes["email"]).first():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Email already in use"
            )

    column_names = {"phone": "phone_number", "birthday": "birthdate"}
    for field, value in changes.items():
        setattr(user, column_names.get(field, field), value)

    db.commit()
    db.refresh(user)
    return user
