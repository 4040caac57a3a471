from typing import Optional

from sqlalchemy.orm import Session
import structlog

from coupon_site.core.exceptions import InvalidCredentials
from coupon_site.core.security import hash_password, verify_password
from coupon_site.models.admin import Admin

logger = structlog.get_logger()


class AdminService:

    @staticmethod
    def get_by_username(db: Session, username: str) -> Optional[Admin]:
        return db.query(Admin).filter(Admin.username == username).first()

    @staticmethod
    def authenticate(db: Session, username: str, password: str) -> Admin:
        """Return the admin for valid credentials, raise InvalidCredentials otherwise."""
        admin = AdminService.get_by_username(db, username)
        if not admin or not verify_password(password, admin.password_hash):
            logger.warning("admin_login_failed", username=username)
            raise InvalidCredentials()

        logger.info("admin_login_succeeded", admin_id=admin.id)
        return admin

    @staticmethod
    def ensure_admin(db: Session, username: str, password: str) -> Admin:
        """Create the admin account if it does not exist yet."""
        admin = AdminService.get_by_username(db, username)
        if admin:
            return admin

        admin = Admin(username=username, password_hash=hash_password(password))
        db.add(admin)
        db.commit()
        db.refresh(admin)
        logger.info("admin_user_created", username=username)
        return admin
