"""文件夹树路由：列表、路径、新建、重命名、移动、归档/恢复与递归删除。

变更类接口在成功后写入审计日志；查询类接口不记录以避免日志噪音。
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.packages.drive.api.v1.schemas.folders import (
    FolderCreateBody,
    FolderDeletionResponse,
    FolderListResponse,
    FolderMoveBody,
    FolderRenameBody,
    FolderResponse,
    StatusBody,
)
from app.packages.drive.core.dependencies import get_current_active_user, get_current_admin_user, get_db
from app.packages.drive.core.enums import AuditActionEnum, NodeStatusEnum
from app.packages.drive.core.responses import create_response
from app.packages.drive.models.user import User
from app.packages.drive.services.folder_service import folder_service
from app.packages.drive.services.log_service import log_service
from app.packages.drive.utils.folder_filter import ROOT, parse_folder_filter
from app.packages.drive.utils.serializers import serialize_folder

router = APIRouter(prefix="/folders", tags=["folders"])


def _location(parent_id: Optional[int]) -> str:
    return "根目录" if parent_id is None else f"文件夹 #{parent_id}"


@router.get("", response_model=FolderListResponse)
def list_folders(
    parent_id: Optional[str] = Query(None, alias="parentId", description="父目录：数字 ID、null/root（根目录）或 all"),
    status: Optional[str] = Query(None, description="按状态过滤：active / archived"),
    db: Session = Depends(get_db),
    _: User = Depends(get_current_active_user),
) -> FolderListResponse:
    parent = parse_folder_filter(parent_id, default=ROOT)
    folders = folder_service.list_folders(db, parent=parent, status=status)
    return create_response("获取文件夹列表成功", [serialize_folder(item) for item in folders])


@router.get("/{folder_id}", response_model=FolderResponse)
def get_folder(
    folder_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_active_user),
) -> FolderResponse:
    return create_response("获取文件夹成功", serialize_folder(folder_service.get(db, folder_id)))


@router.get("/{folder_id}/path", response_model=FolderListResponse)
def get_folder_path(
    folder_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_active_user),
) -> FolderListResponse:
    """返回从根目录到当前文件夹的面包屑序列。"""
    path = folder_service.get_path(db, folder_id)
    return create_response("获取文件夹路径成功", [serialize_folder(item) for item in path])


@router.post("", response_model=FolderResponse)
def create_folder(
    payload: FolderCreateBody,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> FolderResponse:
    folder = folder_service.create(db, name=payload.name, parent_id=payload.parentId, created_by=current_user.id)
    log_service.record(
        db,
        user_id=current_user.id,
        action=AuditActionEnum.CREATE_FOLDER,
        description=f"在{_location(folder.parent_id)}新建文件夹“{folder.name}”",
    )
    return create_response("新建文件夹成功", serialize_folder(folder))


@router.patch("/{folder_id}/rename", response_model=FolderResponse)
def rename_folder(
    folder_id: int,
    payload: FolderRenameBody,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> FolderResponse:
    previous_name = folder_service.get(db, folder_id).name
    folder = folder_service.rename(db, folder_id=folder_id, name=payload.name)
    log_service.record(
        db,
        user_id=current_user.id,
        action=AuditActionEnum.RENAME_FOLDER,
        description=f"将文件夹“{previous_name}”重命名为“{folder.name}”",
    )
    return create_response("重命名成功", serialize_folder(folder))


@router.patch("/{folder_id}/move", response_model=FolderResponse)
def move_folder(
    folder_id: int,
    payload: FolderMoveBody,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> FolderResponse:
    folder = folder_service.move(db, folder_id=folder_id, target_parent_id=payload.targetParentId)
    log_service.record(
        db,
        user_id=current_user.id,
        action=AuditActionEnum.MOVE_FOLDER,
        description=f"将文件夹“{folder.name}”移动到{_location(folder.parent_id)}",
    )
    return create_response("移动成功", serialize_folder(folder))


@router.patch("/{folder_id}/status", response_model=FolderResponse)
def set_folder_status(
    folder_id: int,
    payload: StatusBody,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> FolderResponse:
    folder = folder_service.set_status(db, folder_id=folder_id, status=payload.status)
    restored = folder.status == NodeStatusEnum.ACTIVE.value
    log_service.record(
        db,
        user_id=current_user.id,
        action=AuditActionEnum.RESTORE_FOLDER if restored else AuditActionEnum.ARCHIVE_FOLDER,
        description=f"{'恢复' if restored else '归档'}文件夹“{folder.name}”",
    )
    return create_response("恢复成功" if restored else "归档成功", serialize_folder(folder))


@router.delete("/{folder_id}", response_model=FolderDeletionResponse)
def delete_folder(
    folder_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
) -> FolderDeletionResponse:
    """递归删除文件夹及其全部子文件夹与文件，仅管理员可用。"""
    name = folder_service.get(db, folder_id).name
    deletion = folder_service.delete(db, folder_id)
    log_service.record(
        db,
        user_id=current_user.id,
        action=AuditActionEnum.DELETE_FOLDER,
        description=(
            f"删除文件夹“{name}”（含 {len(deletion.folder_ids)} 个文件夹、{deletion.reports_deleted} 个文件）"
        ),
    )
    return create_response(
        "删除成功",
        {"deletedFolderIds": deletion.folder_ids, "deletedReports": deletion.reports_deleted},
    )
