from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...core.security import UserRole, TokenPayload
from ...api.deps import get_current_account, get_current_user_token, rate_limit_check
from ...services.auth_service import AuthService
from ...schemas.auth import UserLogin, UserRegister, TokenResponse, ChangePassword

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserRegister,
    db: Session = Depends(get_db),
    _: None = Depends(rate_limit_check)
):
    """Register a patient account and log it in."""
    auth_service = AuthService(db)
    user = auth_service.register_user(user_data)
    return auth_service.token_response(user, UserRole.PATIENT)


@router.post("/login", response_model=TokenResponse)
async def login(
    login_data: UserLogin,
    db: Session = Depends(get_db),
    _: None = Depends(rate_limit_check)
):
    """Patient login."""
    return AuthService(db).authenticate(UserRole.PATIENT, login_data)


@router.post("/doctor/login", response_model=TokenResponse)
async def doctor_login(
    login_data: UserLogin,
    db: Session = Depends(get_db),
    _: None = Depends(rate_limit_check)
):
    return AuthService(db).authenticate(UserRole.DOCTOR, login_data)


@router.post("/admin/login", response_model=TokenResponse)
async def admin_login(
    login_data: UserLogin,
    db: Session = Depends(get_db),
    _: None = Depends(rate_limit_check)
):
    return AuthService(db).authenticate(UserRole.ADMIN, login_data)


@router.get("/me")
async def get_current_account_info(
    token_payload: TokenPayload = Depends(get_current_user_token),
    account=Depends(get_current_account)
):
    """Profile of whoever the token belongs to."""
    return AuthService.profile(account, token_payload.role)


@router.post("/change-password")
async def change_password(
    password_data: ChangePassword,
    account=Depends(get_current_account),
    db: Session = Depends(get_db)
):
    AuthService(db).change_password(account, password_data)
    return {"message": "Password changed successfully"}


@router.post("/verify-token")
async def verify_token_endpoint(
    token_payload: TokenPayload = Depends(get_current_user_token)
):
    """Verify if token is valid."""
    return {
        "valid": True,
        "id": token_payload.principal_id,
        "email": token_payload.email,
        "role": token_payload.role,
        "expires": token_payload.exp
    }
