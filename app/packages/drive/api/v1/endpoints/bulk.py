"""批量操作路由：恢复、归档、移动与删除。

部分成功时仍返回 200，并在 ``data`` 中给出逐项错误；全部失败时返回错误响应
（仅包含重名冲突时为 409，否则为 400），``data`` 同样携带聚合结果。
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.packages.drive.api.v1.schemas.bulk import BulkBody, BulkMoveBody, BulkResponse
from app.packages.drive.core.constants import HTTP_STATUS_BAD_REQUEST, HTTP_STATUS_CONFLICT
from app.packages.drive.core.dependencies import get_current_active_user, get_current_admin_user, get_db
from app.packages.drive.core.enums import AuditActionEnum, BulkOutcomeEnum
from app.packages.drive.core.exceptions import AppException
from app.packages.drive.core.responses import create_response
from app.packages.drive.models.user import User
from app.packages.drive.services.bulk_service import BulkResult, bulk_service
from app.packages.drive.services.log_service import log_service

router = APIRouter(prefix="/bulk", tags=["bulk"])


def _respond(db: Session, user: User, result: BulkResult, *, label: str, action: AuditActionEnum) -> dict:
    if result.succeeded:
        log_service.record(db, user_id=user.id, action=action, description=f"批量{result.summary(label)}")
    if result.outcome is BulkOutcomeEnum.FAILURE:
        code = HTTP_STATUS_CONFLICT if result.only_duplicates else HTTP_STATUS_BAD_REQUEST
        raise AppException(result.summary(label), code, data=result.to_dict())
    return create_response(result.summary(label), result.to_dict())


@router.post("/restore", response_model=BulkResponse)
def bulk_restore(
    payload: BulkBody,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> BulkResponse:
    result = bulk_service.bulk_restore(db, folder_ids=payload.folderIds, report_ids=payload.reportIds)
    return _respond(db, current_user, result, label="恢复", action=AuditActionEnum.BULK_RESTORE)


@router.post("/archive", response_model=BulkResponse)
def bulk_archive(
    payload: BulkBody,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> BulkResponse:
    result = bulk_service.bulk_archive(db, folder_ids=payload.folderIds, report_ids=payload.reportIds)
    return _respond(db, current_user, result, label="归档", action=AuditActionEnum.BULK_ARCHIVE)


@router.post("/move", response_model=BulkResponse)
def bulk_move(
    payload: BulkMoveBody,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> BulkResponse:
    result = bulk_service.bulk_move(
        db,
        report_ids=payload.reportIds,
        folder_ids=payload.folderIds,
        target_parent_id=payload.targetParentId,
    )
    return _respond(db, current_user, result, label="移动", action=AuditActionEnum.BULK_MOVE)


@router.post("/delete", response_model=BulkResponse)
def bulk_delete(
    payload: BulkBody,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
) -> BulkResponse:
    """批量物理删除，仅管理员可用。"""
    result = bulk_service.bulk_delete(db, folder_ids=payload.folderIds, report_ids=payload.reportIds)
    return _respond(db, current_user, result, label="删除", action=AuditActionEnum.BULK_DELETE)
