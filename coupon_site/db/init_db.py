import structlog
from sqlalchemy.orm import Session

from coupon_site.core.config import Settings
from coupon_site.db.session import Database
from coupon_site.services.admin_service import AdminService

logger = structlog.get_logger()


def init_db(db: Session, settings: Settings) -> None:
    """Initialize database with default data"""

    seed_password = (settings.DEFAULT_ADMIN_PASSWORD or "").strip()
    if not seed_password:
        existing = AdminService.get_by_username(db, settings.DEFAULT_ADMIN_USERNAME)
        if existing is None:
            message = (
                "Missing admin bootstrap credentials: set DEFAULT_ADMIN_PASSWORD "
                "or create an admin manually before launch."
            )
            if settings.ENVIRONMENT == "production":
                logger.error("admin_bootstrap_missing", environment=settings.ENVIRONMENT)
                raise RuntimeError(message)
            logger.warning("admin_bootstrap_missing", environment=settings.ENVIRONMENT)
        return

    AdminService.ensure_admin(db, settings.DEFAULT_ADMIN_USERNAME, seed_password)
    logger.info("database_initialized")


if __name__ == "__main__":
    from coupon_site.core.config import get_settings

    settings = get_settings()
    database = Database(settings.DATABASE_URL)
    database.open()
    database.create_tables()
    db = database.session()
    try:
        init_db(db, settings)
    finally:
        db.close()
        database.close()
