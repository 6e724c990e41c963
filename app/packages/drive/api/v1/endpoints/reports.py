"""文件（报表）路由：列表、上传、更新、批量改挂目录、下载与删除。"""

from __future__ import annotations

from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session

from app.packages.drive.api.v1.schemas.reports import (
    ReportCreateBody,
    ReportDeletionResponse,
    ReportListResponse,
    ReportMoveBody,
    ReportMoveResponse,
    ReportResponse,
    ReportUpdateBody,
    to_model_fields,
)
from app.packages.drive.core.dependencies import get_current_active_user, get_current_admin_user, get_db
from app.packages.drive.core.enums import AuditActionEnum
from app.packages.drive.core.responses import create_response
from app.packages.drive.models.user import User
from app.packages.drive.services.log_service import log_service
from app.packages.drive.services.report_service import report_service
from app.packages.drive.utils.folder_filter import ALL, parse_folder_filter
from app.packages.drive.utils.serializers import serialize_report

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("", response_model=ReportListResponse)
def list_reports(
    folder_id: Optional[str] = Query(None, alias="folderId", description="所在目录：数字 ID、null/root（根目录）或 all"),
    status: Optional[str] = Query(None, description="按状态过滤：active / archived"),
    db: Session = Depends(get_db),
    _: User = Depends(get_current_active_user),
) -> ReportListResponse:
    folder = parse_folder_filter(folder_id, default=ALL)
    reports = report_service.list_reports(db, folder=folder, status=status)
    return create_response("获取文件列表成功", [serialize_report(item) for item in reports])


@router.get("/{report_id}", response_model=ReportResponse)
def get_report(
    report_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_active_user),
) -> ReportResponse:
    return create_response("获取文件成功", serialize_report(report_service.get(db, report_id)))


@router.get("/{report_id}/download")
def download_report(
    report_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_active_user),
) -> Response:
    report = report_service.get(db, report_id)
    content = report_service.read_content(report)
    return Response(
        content=content,
        media_type=report.file_type or "application/octet-stream",
        headers={"Content-Disposition": f"attachment; filename*=UTF-8''{quote(report.file_name)}"},
    )


@router.post("", response_model=ReportResponse)
def create_report(
    payload: ReportCreateBody,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> ReportResponse:
    report = report_service.create(
        db,
        payload=to_model_fields(payload.model_dump()),
        uploaded_by=current_user.id,
    )
    log_service.record(
        db,
        user_id=current_user.id,
        action=AuditActionEnum.UPLOAD_REPORT,
        description=f"上传文件“{report.title}”",
    )
    return create_response("上传成功", serialize_report(report))


@router.post("/move", response_model=ReportMoveResponse)
def move_reports(
    payload: ReportMoveBody,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> ReportMoveResponse:
    moved = report_service.move_many(db, report_ids=payload.reportIds, target_folder_id=payload.targetFolderId)
    if moved:
        target = "根目录" if payload.targetFolderId is None else f"文件夹 #{payload.targetFolderId}"
        log_service.record(
            db,
            user_id=current_user.id,
            action=AuditActionEnum.MOVE_REPORTS,
            description=f"将 {moved} 个文件移动到{target}",
        )
    return create_response("移动成功", {"moved": moved})


@router.patch("/{report_id}", response_model=ReportResponse)
def update_report(
    report_id: int,
    payload: ReportUpdateBody,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> ReportResponse:
    changes = to_model_fields(payload.model_dump(exclude_unset=True))
    report = report_service.update(db, report_id=report_id, changes=changes)
    log_service.record(
        db,
        user_id=current_user.id,
        action=AuditActionEnum.UPDATE_REPORT,
        description=f"更新文件“{report.title}”（{', '.join(sorted(changes)) or '无变更'}）",
    )
    return create_response("更新成功", serialize_report(report))


@router.delete("/{report_id}", response_model=ReportDeletionResponse)
def delete_report(
    report_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
) -> ReportDeletionResponse:
    title = report_service.get(db, report_id).title
    report_service.delete(db, report_id)
    log_service.record(
        db,
        user_id=current_user.id,
        action=AuditActionEnum.DELETE_REPORT,
        description=f"删除文件“{title}”",
    )
    return create_response("删除成功", None)
