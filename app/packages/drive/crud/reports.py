"""Report CRUD：按目录/状态精确过滤，以及批量改挂目录。"""

from __future__ import annotations

from typing import Iterable, Optional

from sqlalchemy import delete, update
from sqlalchemy.orm import Session

from app.packages.drive.crud.base import CRUDBase
from app.packages.drive.models.report import Report
from app.packages.drive.utils.folder_filter import FolderFilter, apply_folder_filter


class CRUDReport(CRUDBase[Report]):
    def list_by_folder(self, db: Session, *, folder: FolderFilter, status: Optional[str] = None) -> list[Report]:
        query = apply_folder_filter(self.query(db), Report.folder_id, folder)
        if status:
            query = query.filter(Report.status == status)
        return query.order_by(Report.created_at.desc(), Report.id.desc()).all()

    def move_many(self, db: Session, report_ids: Iterable[int], folder_id: Optional[int]) -> int:
        """一次 UPDATE 改写所有命中行的 folder_id，不存在的 id 自然被忽略。"""
        ids = list(report_ids)
        if not ids:
            return 0
        result = db.execute(
            update(Report)
            .where(Report.id.in_(ids))
            .values(folder_id=folder_id)
            .execution_options(synchronize_session="fetch")
        )
        return int(result.rowcount or 0)

    def delete_in_folders(self, db: Session, folder_ids: Iterable[int]) -> int:
        ids = list(folder_ids)
        if not ids:
            return 0
        result = db.execute(
            delete(Report).where(Report.folder_id.in_(ids)).execution_options(synchronize_session=False)
        )
        return int(result.rowcount or 0)


report_crud = CRUDReport(Report)
