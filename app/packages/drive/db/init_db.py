"""Database bootstrapping utilities."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from app.packages.drive.core.constants import (
    DEFAULT_ADMIN_FULL_NAME,
    DEFAULT_ADMIN_PASSWORD,
    DEFAULT_ADMIN_USERNAME,
    DEFAULT_ASSISTANT_FULL_NAME,
    DEFAULT_ASSISTANT_PASSWORD,
    DEFAULT_ASSISTANT_USERNAME,
)
from app.packages.drive.core.enums import RoleEnum, UserStatusEnum
from app.packages.drive.core.security import get_password_hash
from app.packages.drive.db import session as db_session
from app.packages.drive.models import Activity, ActivityLog, Folder, Report, User  # noqa: F401 - ensure table creation
from app.packages.drive.models.base import Base

logger = logging.getLogger(__name__)

DEFAULT_USERS = (
    (DEFAULT_ADMIN_USERNAME, DEFAULT_ADMIN_PASSWORD, DEFAULT_ADMIN_FULL_NAME, RoleEnum.ADMIN.value),
    (DEFAULT_ASSISTANT_USERNAME, DEFAULT_ASSISTANT_PASSWORD, DEFAULT_ASSISTANT_FULL_NAME, RoleEnum.ASSISTANT.value),
)


def init_db() -> None:
    """Create all database tables if they do not exist and seed baseline data."""
    Base.metadata.create_all(bind=db_session.engine)

    session = db_session.SessionLocal()
    try:
        _seed_default_users(session)
        session.commit()
    except Exception:  # pragma: no cover - initialization failures should surface
        session.rollback()
        logger.exception("Failed to seed default data during database initialization")
        raise
    finally:
        session.close()


def _seed_default_users(db: Session) -> None:
    """Ensure the administrator and assistant accounts exist; existing rows keep their passwords."""
    for username, password, full_name, role in DEFAULT_USERS:
        user = db.query(User).filter(User.username == username).first()
        if user is None:
            db.add(
                User(
                    username=username,
                    hashed_password=get_password_hash(password),
                    full_name=full_name,
                    role=role,
                    status=UserStatusEnum.ACTIVE.value,
                )
            )
            continue
        if not user.full_name:
            user.full_name = full_name
        if user.role != role:
            user.role = role
        if user.status is None:
            user.status = UserStatusEnum.ACTIVE.value
    db.flush()
