from sqlalchemy.orm import Session
from fastapi import HTTPException, status
import logging

from ..models.user import User
from ..models.doctor import Doctor
from ..models.admin import Admin
from ..core.security import (
    verify_password, get_password_hash, issue_token,
    AuthenticationError, TokenPayload, UserRole
)
from ..schemas.auth import UserLogin, UserRegister, TokenResponse, ChangePassword
from ..schemas.account import UserResponse, DoctorResponse, AdminResponse

logger = logging.getLogger(__name__)

ACCOUNT_MODELS = {
    UserRole.PATIENT: User,
    UserRole.DOCTOR: Doctor,
    UserRole.ADMIN: Admin,
}

PROFILE_SCHEMAS = {
    UserRole.PATIENT: UserResponse,
    UserRole.DOCTOR: DoctorResponse,
    UserRole.ADMIN: AdminResponse,
}


class AuthService:
    def __init__(self, db: Session):
        self.db = db

    def register_user(self, user_data: UserRegister) -> User:
        """Register a new patient account."""
        existing_user = self.db.query(User).filter(
            User.email == user_data.email
        ).first()

        if existing_user:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="User already exists"
            )

        new_user = User(
            name=user_data.name,
            email=user_data.email,
            password_hash=get_password_hash(user_data.password),
            avatar=user_data.avatar,
            address=user_data.address,
            phone_number=user_data.phone,
            birthdate=user_data.birthday,
        )

        self.db.add(new_user)
        self.db.commit()
        self.db.refresh(new_user)

        logger.info(f"Registered user {new_user.id} <{new_user.email}>")
        return new_user

    def authenticate(self, role: UserRole, login_data: UserLogin) -> TokenResponse:
        """Check credentials against the table for ``role`` and issue a token."""
        model = ACCOUNT_MODELS[role]
        account = self.db.query(model).filter(
            model.email == login_data.email
        ).first()

        if not account or not verify_password(login_data.password, account.password_hash):
            logger.warning(f"Failed {role.value} login for {login_data.email}")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid credentials"
            )

        return self.token_response(account, role)

    def token_response(self, account, role: UserRole) -> TokenResponse:
        token = issue_token(account.id, account.email, account.name, role)
        return TokenResponse(
            access_token=token.access_token,
            token_type=token.token_type,
            expires_in=token.expires_in,
            role=role,
            profile=self.profile(account, role)
        )

    @staticmethod
    def profile(account, role: UserRole):
        return PROFILE_SCHEMAS[role].model_validate(account)

    def get_account(self, token_payload: TokenPayload):
        """Load the account a token was issued to."""
        model = ACCOUNT_MODELS.get(token_payload.role)
        account_id = token_payload.principal_id
        if model is None or account_id is None:
            raise AuthenticationError("Invalid token payload")

        account = self.db.get(model, account_id)
        if not account:
            raise AuthenticationError("Account not found")
        return account

    def change_password(self, account, password_data: ChangePassword) -> None:
        if not verify_password(password_data.current_password, account.password_hash):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Current password is incorrect"
            )

        account.password_hash = get_password_hash(password_data.new_password)
        self.db.commit()
