from sqlalchemy.orm import Session
from fastapi import HTTPException, status
import logging

from ..core.config import settings
from ..core.security import get_password_hash
from ..models.admin import Admin
from ..schemas.account import AdminUpdate

logger = logging.getLogger(__name__)


class AdminService:
    def __init__(self, db: Session):
        self.db = db

    def ensure_default_admin(self) -> None:
        """Create the bootstrap admin when no admin account exists yet."""
        if self.db.query(Admin).count() > 0:
            logger.info("Admin already exists")
            return

        admin = Admin(
            name=settings.DEFAULT_ADMIN_NAME,
            email=settings.DEFAULT_ADMIN_EMAIL,
            password_hash=get_password_hash(settings.DEFAULT_ADMIN_PASSWORD),
        )
        self.db.add(admin)
        self.db.commit()
        logger.info(f"Default admin created: {admin.email}")

    def get(self, admin_id: int) -> Admin:
        admin = self.db.get(Admin, admin_id)
        if not admin:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Admin not found"
            )
        return admin

    def update_profile(self, admin_id: int, data: AdminUpdate) -> Admin:
        admin = self.get(admin_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)

        if "email" in changes and changes["email"] != admin.email:
            clash = self.db.query(Admin).filter(Admin.email == changes["email"]).first()
            if clash:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Email already in use"
                )

        password = changes.pop("password", None)
        if password:
            admin.password_hash = get_password_hash(password)
        for field, value in changes.items():
            setattr(admin, field, value)

        self.db.commit()
        self.db.refresh(admin)
        return admin
