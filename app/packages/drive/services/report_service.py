"""文件（报表）放置服务：关联文件与目录/状态，支持批量改挂目录。

与文件夹不同，文件名在目录内不做唯一性约束，移动文件也不做重名校验。
"""

from __future__ import annotations

import base64
import binascii
from typing import Any, Callable, Iterable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.packages.drive.core.enums import NodeStatusEnum
from app.packages.drive.core.exceptions import InvalidOperationError, NotFoundError
from app.packages.drive.core.logger import logger
from app.packages.drive.crud.activities import activity_crud
from app.packages.drive.crud.folders import folder_crud
from app.packages.drive.crud.reports import report_crud
from app.packages.drive.db.session import transaction
from app.packages.drive.models.report import Report
from app.packages.drive.services.activity_service import activity_service
from app.packages.drive.utils.folder_filter import FolderFilter

# 允许通过通用更新接口修改的字段
UPDATABLE_FIELDS = frozenset(
    {
        "title",
        "description",
        "file_name",
        "file_type",
        "file_size",
        "file_data",
        "folder_id",
        "status",
        "activity_id",
        "report_year",
        "report_month",
    }
)

ActivityLinkedHook = Callable[..., Any]


class ReportService:
    def __init__(self, on_activity_linked: Optional[ActivityLinkedHook] = None) -> None:
        self._on_activity_linked = on_activity_linked or activity_service.on_report_linked

    # ----------------------------
    # 查询
    # ----------------------------
    def get(self, db: Session, report_id: int) -> Report:
        report = report_crud.get(db, report_id)
        if report is None:
            raise NotFoundError("文件不存在或已删除")
        return report

    def list_reports(self, db: Session, *, folder: FolderFilter, status: Optional[str] = None) -> list[Report]:
        """``folder`` 为 Root 时只返回 folder_id 为空的文件；status 为精确匹配。"""
        return report_crud.list_by_folder(db, folder=folder, status=self._normalize_status(status) if status else None)

    def read_content(self, report: Report) -> bytes:
        if not report.file_data:
            return b""
        try:
            return base64.b64decode(report.file_data, validate=True)
        except (binascii.Error, ValueError) as exc:
            logger.warning("report.content invalid base64 id=%s: %s", report.id, exc)
            raise InvalidOperationError("文件内容已损坏，无法下载") from exc

    # ----------------------------
    # 变更
    # ----------------------------
    def create(self, db: Session, *, payload: dict[str, Any], uploaded_by: Optional[int]) -> Report:
        data = self._clean_changes(payload)
        data.setdefault("status", NodeStatusEnum.ACTIVE.value)
        with transaction(db):
            self._ensure_folder(db, data.get("folder_id"))
            if data.get("activity_id") is not None and activity_crud.get(db, data["activity_id"]) is None:
                raise NotFoundError("关联的活动不存在")
            report = report_crud.create(db, data | {"uploaded_by": uploaded_by})
        logger.info("report.create id=%s folder_id=%s activity_id=%s", report.id, report.folder_id, report.activity_id)

        if report.activity_id is not None:
            self._emit_activity_linked(db, report, uploaded_by)
        return report

    def update(self, db: Session, *, report_id: int, changes: dict[str, Any]) -> Report:
        """通用局部更新（重命名、状态、改挂目录），不做唯一性约束。"""
        data = self._clean_changes(changes)
        with transaction(db):
            report = report_crud.get_for_update(db, report_id)
            if report is None:
                raise NotFoundError("文件不存在或已删除")
            if "folder_id" in data:
                self._ensure_folder(db, data["folder_id"])
            report_crud.update(db, report, data)
        logger.info("report.update id=%s fields=%s", report_id, sorted(data))
        return report

    def set_status(self, db: Session, *, report_id: int, status: str) -> Report:
        return self.update(db, report_id=report_id, changes={"status": status})

    def move_many(self, db: Session, *, report_ids: Iterable[int], target_folder_id: Optional[int]) -> int:
        """批量改挂目录，返回实际更新的行数；不存在的 ID 自然被忽略，不做重名校验。"""
        ids = list(dict.fromkeys(report_ids))
        with transaction(db):
            self._ensure_folder(db, target_folder_id)
            moved = report_crud.move_many(db, ids, target_folder_id)
        logger.info("report.move_many requested=%s moved=%s target=%s", len(ids), moved, target_folder_id)
        return moved

    def delete(self, db: Session, report_id: int) -> None:
        with transaction(db):
            report = report_crud.get_for_update(db, report_id)
            if report is None:
                raise NotFoundError("文件不存在或已删除")
            report_crud.hard_delete(db, report)
        logger.info("report.delete id=%s", report_id)

    # ----------------------------
    # 内部
    # ----------------------------
    def _ensure_folder(self, db: Session, folder_id: Optional[int]) -> None:
        if folder_id is not None and folder_crud.get(db, folder_id) is None:
            raise NotFoundError("目标文件夹不存在")

    def _clean_changes(self, changes: dict[str, Any]) -> dict[str, Any]:
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise InvalidOperationError(f"不支持修改的字段：{', '.join(sorted(unknown))}")
        data = dict(changes)
        if "status" in data:
            data["status"] = self._normalize_status(data["status"])
        for key in ("title", "file_name"):
            if key in data:
                value = (data[key] or "").strip()
                if not value:
                    raise InvalidOperationError("文件标题与文件名不能为空")
                data[key] = value
        return data

    @staticmethod
    def _normalize_status(status: Optional[str]) -> str:
        value = (status or "").strip().lower()
        if value not in {item.value for item in NodeStatusEnum}:
            raise InvalidOperationError(f"不支持的状态：{status}")
        return value

    def _emit_activity_linked(self, db: Session, report: Report, user_id: Optional[int]) -> None:
        """通知活动协作方“文件已提交”；其失败不回滚已提交的文件。"""
        try:
            self._on_activity_linked(db, activity_id=report.activity_id, report_id=report.id, user_id=user_id)
        except SQLAlchemyError as exc:
            db.rollback()
            logger.warning("report.activity_hook failed report_id=%s activity_id=%s: %s", report.id, report.activity_id, exc)


report_service = ReportService()
