"""Auth service."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from civichub.core.config import settings
from civichub.core.errors import EmailTakenError, StoreError
from civichub.core.security import hash_password, verify_password
from civichub.models.enums import Role
from civichub.models.user import User
from civichub.schemas.auth import RegisterRequest

logger = logging.getLogger(__name__)


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.execute(select(User).where(User.email == email)).scalar_one_or_none()


def role_for_email(email: str) -> str:
    """Admins are provisioned through configuration, never self-selected."""
    admins = {e.strip().lower() for e in settings.admin_emails}
    return Role.admin.value if email.lower() in admins else Role.citizen.value


def create_user(db: Session, data: RegisterRequest) -> User:
    """Insert a user; the unique email index settles concurrent registrations."""
    if get_user_by_email(db, data.email):
        raise EmailTakenError()
    user = User(
        email=data.email,
        hashed_password=hash_password(data.password),
        full_name=data.full_name,
        role=role_for_email(data.email),
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise EmailTakenError() from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Store failure while registering %s", data.email)
        raise StoreError() from exc
    db.refresh(user)
    logger.info("Registered user %s as %s", user.email, user.role)
    return user


def authenticate_user(db: Session, email: str, password: str) -> User | None:
    """Return the active user matching the credentials, or None."""
    user = get_user_by_email(db, email)
    if not user or not verify_password(password, user.hashed_password):
        return None
    if not user.is_active:
        return None
    return user
