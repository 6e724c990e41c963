"""审计日志查询路由。"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.packages.drive.api.v1.schemas.logs import ActivityLogListResponse
from app.packages.drive.core.dependencies import get_current_active_user, get_db
from app.packages.drive.models.user import User
from app.packages.drive.services.log_service import log_service

router = APIRouter(prefix="/logs", tags=["logs"])


@router.get("", response_model=ActivityLogListResponse)
def list_activity_logs(
    page: int = Query(1, ge=1, description="页码，从 1 开始"),
    page_size: int = Query(20, ge=1, le=200, description="每页数量"),
    db: Session = Depends(get_db),
    _: User = Depends(get_current_active_user),
) -> ActivityLogListResponse:
    """按时间倒序返回审计日志，附带操作人姓名。"""
    return log_service.list_logs(db, page=page, page_size=page_size)
