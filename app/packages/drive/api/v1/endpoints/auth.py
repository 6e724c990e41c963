"""认证相关路由定义。"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from app.packages.drive.api.v1.schemas.auth import CurrentUserResponse, LoginRequest, LogoutResponse, TokenResponse
from app.packages.drive.core.dependencies import get_current_active_user, get_db
from app.packages.drive.core.responses import create_response
from app.packages.drive.models.user import User
from app.packages.drive.services.auth_service import auth_service, serialize_user

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=TokenResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)) -> TokenResponse:
    """校验凭证并签发访问令牌。"""
    return auth_service.login(db, username=payload.username, password=payload.password)


@router.post("/logout", response_model=LogoutResponse)
def logout(
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> LogoutResponse:
    """退出登录，前端需删除本地缓存的令牌。"""
    return auth_service.logout(db, user=current_user, session_id=getattr(request.state, "session_id", None))


@router.get("/me", response_model=CurrentUserResponse)
def read_current_user(current_user: User = Depends(get_current_active_user)) -> CurrentUserResponse:
    return create_response("获取当前用户成功", serialize_user(current_user))
