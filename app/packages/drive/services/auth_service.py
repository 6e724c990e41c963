"""认证服务：封装登录、退出等核心业务流程。"""

from typing import Optional

from sqlalchemy.orm import Session

from app.packages.drive.core.config import get_settings
from app.packages.drive.core.constants import ACCESS_TOKEN_TYPE, HTTP_STATUS_FORBIDDEN, HTTP_STATUS_UNAUTHORIZED
from app.packages.drive.core.enums import AuditActionEnum
from app.packages.drive.core.exceptions import AppException
from app.packages.drive.core.logger import logger
from app.packages.drive.core.responses import create_response
from app.packages.drive.core.security import create_access_token, store_refreshed_token, verify_password
from app.packages.drive.core.session import create_session, delete_session
from app.packages.drive.crud.users import user_crud
from app.packages.drive.models.user import User
from app.packages.drive.services.log_service import log_service


def serialize_user(user: User) -> dict:
    return {
        "id": user.id,
        "username": user.username,
        "fullName": user.full_name,
        "role": user.role,
        "status": user.status,
    }


class AuthService:
    """负责处理登录与退出流程，并记录审计日志。"""

    def login(self, db: Session, *, username: str, password: str) -> dict:
        """校验用户凭证，签发访问令牌并记录登录日志。"""
        user = user_crud.get_by_username(db, username.strip())
        if user is None or not verify_password(password, user.hashed_password):
            logger.info("auth.login failed username=%s", username)
            raise AppException(msg="用户名或密码错误", code=HTTP_STATUS_UNAUTHORIZED)
        if not user.is_active:
            raise AppException(msg="用户已被禁用", code=HTTP_STATUS_FORBIDDEN)

        ttl_seconds = max(get_settings().access_token_expire_minutes, 1) * 60
        session_id = create_session(user.id, ttl_seconds)
        access_token = create_access_token({"user_id": user.id, "username": user.username, "sid": session_id})

        log_service.record(db, user_id=user.id, action=AuditActionEnum.LOGIN, description=f"{user.full_name} 登录系统")

        # 将签发的访问令牌通过上下文传递，便于响应阶段统一在 body.meta 与响应头返回
        store_refreshed_token(access_token)
        return create_response(
            "登录成功",
            {
                "access_token": access_token,
                "token_type": ACCESS_TOKEN_TYPE,
                "user": serialize_user(user),
            },
        )

    def logout(self, db: Session, *, user: User, session_id: Optional[str]) -> dict:
        if session_id:
            delete_session(session_id)
        # 退出后不再回传刷新令牌
        store_refreshed_token(None)
        log_service.record(db, user_id=user.id, action=AuditActionEnum.LOGOUT, description=f"{user.full_name} 退出系统")
        return create_response("退出成功", None)


auth_service = AuthService()
