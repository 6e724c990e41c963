"""统一的管理员权限判定与拦截封装，避免到处散落角色硬编码。"""

from __future__ import annotations

from typing import Optional

from app.packages.drive.core.constants import ADMIN_ROLE, HTTP_STATUS_FORBIDDEN
from app.packages.drive.core.exceptions import AppException


def is_admin_role(role: Optional[str]) -> bool:
    return (role or "").strip().lower() == ADMIN_ROLE


def is_admin_user(user: object) -> bool:
    return is_admin_role(getattr(user, "role", None))


def ensure_admin(user: object, *, message: str) -> None:
    if not is_admin_user(user):
        raise AppException(message, HTTP_STATUS_FORBIDDEN)
