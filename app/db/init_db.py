import logging

from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.security import hash_password
from app.db.session import SessionLocal
from app.models import User, UserRole

logger = logging.getLogger(__name__)


def seed_super_admin(db: Session) -> User:
    """Create or refresh the super admin account from settings. Safe to run repeatedly."""
    settings = get_settings()
    user = db.query(User).filter(User.email == settings.super_admin_email).first()
    if user is None:
        user = User(email=settings.super_admin_email)
        db.add(user)
        logger.info("Creating super admin %s", settings.super_admin_email)
    else:
        logger.info("Updating super admin %s", settings.super_admin_email)

    user.name = settings.super_admin_name
    user.role = UserRole.SUPER_ADMIN
    user.password = hash_password(settings.super_admin_password)
    user.subscription_end_date = None
    db.commit()
    db.refresh(user)
    return user


def init_db() -> None:
    db = SessionLocal()
    try:
        seed_super_admin(db)
    finally:
        db.close()


if __name__ == "__main__":
    logging.basicConfig(level=get_settings().log_level)
    init_db()
