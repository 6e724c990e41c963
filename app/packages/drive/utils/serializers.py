"""领域对象到接口输出（camelCase 字典）的转换。"""

from __future__ import annotations

from typing import Any

from app.packages.drive.core.timezone import format_datetime
from app.packages.drive.models.folder import Folder
from app.packages.drive.models.report import Report


def serialize_folder(folder: Folder) -> dict[str, Any]:
    return {
        "id": folder.id,
        "name": folder.name,
        "parentId": folder.parent_id,
        "status": folder.status,
        "createdBy": folder.created_by,
        "createdAt": format_datetime(folder.created_at),
    }


def serialize_report(report: Report) -> dict[str, Any]:
    """文件元数据；内容（file_data）体积大，只通过下载接口返回。"""
    return {
        "id": report.id,
        "title": report.title,
        "description": report.description,
        "fileName": report.file_name,
        "fileType": report.file_type,
        "fileSize": report.file_size,
        "folderId": report.folder_id,
        "status": report.status,
        "uploadedBy": report.uploaded_by,
        "activityId": report.activity_id,
        "reportYear": report.report_year,
        "reportMonth": report.report_month,
        "createdAt": format_datetime(report.created_at),
    }
