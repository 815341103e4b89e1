from fastapi import Depends, HTTPException, status, Request
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from typing import List

from ..core.config import settings
from ..core.database import get_db, get_redis
from ..core.security import (
    security, verify_token, AuthenticationError,
    AuthorizationError, UserRole, TokenPayload
)
from ..models.user import User
from ..services.auth_service import AuthService


async def get_current_user_token(
    credentials: HTTPAuthorizationCredentials = Depends(security)
) -> TokenPayload:
    """Extract and verify JWT token from Authorization header."""
    token = credentials.credentials

    token_payload = verify_token(token)
    if not token_payload:
        raise AuthenticationError("Invalid or expired token")

    if token_payload.token_type != "access":
        raise AuthenticationError("Invalid token type")

    return token_payload


async def get_current_account(
    token_payload: TokenPayload = Depends(get_current_user_token),
    db: Session = Depends(get_db)
):
    """Load the user, doctor or admin row behind the token."""
    return AuthService(db).get_account(token_payload)


# Role-based access control dependencies
def require_role(allowed_roles: List[UserRole]):
    """Create a dependency that requires specific user roles."""
    async def role_checker(
        token_payload: TokenPayload = Depends(get_current_user_token)
    ) -> TokenPayload:
        if token_payload.role not in allowed_roles:
            raise AuthorizationError(
                f"Access denied. Required roles: {[role.value for role in allowed_roles]}"
            )
        return token_payload

    return role_checker


get_admin_token = require_role([UserRole.ADMIN])
get_staff_token = require_role([UserRole.DOCTOR, UserRole.ADMIN])


async def get_patient_user(
    token_payload: TokenPayload = Depends(require_role([UserRole.PATIENT])),
    db: Session = Depends(get_db)
) -> User:
    """Require a patient token and return its user row."""
    return AuthService(db).get_account(token_payload)


def ensure_self_or_staff(token_payload: TokenPayload, user_id: int) -> None:
    """Patients may only touch their own records; staff may touch any."""
    if token_payload.is_staff:
        return
    if token_payload.principal_id != user_id:
        raise AuthorizationError("You can only access your own records")


def ensure_doctor_self_or_admin(token_payload: TokenPayload, doctor_id: int) -> None:
    """Doctors may only act for themselves; admins may act for any doctor."""
    if token_payload.role == UserRole.ADMIN:
        return
    if token_payload.role != UserRole.DOCTOR or token_payload.principal_id != doctor_id:
        raise AuthorizationError("You can only manage your own doctor account")


# Rate limiting dependency
async def rate_limit_check(
    request: Request,
    redis_client=Depends(get_redis)
) -> None:
    """Fixed-window throttle on login and registration, per client IP."""
    client_ip = request.client.host if request.client else "unknown"
    key = f"rate_limit:{client_ip}"

    current_requests = redis_client.get(key)
    if current_requests is None:
        redis_client.setex(key, settings.RATE_LIMIT_WINDOW_SECONDS, 1)
    else:
        if int(current_requests) >= settings.RATE_LIMIT_MAX_REQUESTS:
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail="Too many requests. Please try again later."
            )
        redis_client.incr(key)
