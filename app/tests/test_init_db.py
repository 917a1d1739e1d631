from app.core.config import get_settings
from app.core.security import verify_password
from app.db.init_db import seed_super_admin
from app.models import User, UserRole


def test_seed_super_admin_is_idempotent(db_session):
    settings = get_settings()
    seed_super_admin(db_session)
    seed_super_admin(db_session)

    users = db_session.query(User).all()
    assert len(users) == 1
    assert users[0].email == settings.super_admin_email
    assert users[0].role == UserRole.SUPER_ADMIN
    assert verify_password(settings.super_admin_password, users[0].password)


def test_seed_promotes_existing_account(db_session):
    settings = get_settings()
    db_session.add(User(name="Eski", email=settings.super_admin_email, role=UserRole.TEACHER))
    db_session.commit()

    user = seed_super_admin(db_session)
    assert user.role == UserRole.SUPER_ADMIN
    assert user.name == settings.super_admin_name
    assert user.subscription_end_date is None
