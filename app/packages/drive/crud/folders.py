"""Folder CRUD：目录树的点查询，所有遍历都直接走持久化的 parent_id 关系。"""

from __future__ import annotations

from typing import Iterable, Optional

from sqlalchemy import delete
from sqlalchemy.orm import Session

from app.packages.drive.crud.base import CRUDBase
from app.packages.drive.models.folder import Folder
from app.packages.drive.utils.folder_filter import FolderFilter, apply_folder_filter


class CRUDFolder(CRUDBase[Folder]):
    def list_by_parent(
        self,
        db: Session,
        *,
        parent: FolderFilter,
        status: Optional[str] = None,
    ) -> list[Folder]:
        query = apply_folder_filter(self.query(db), Folder.parent_id, parent)
        if status:
            query = query.filter(Folder.status == status)
        return query.order_by(Folder.name.asc(), Folder.id.asc()).all()

    def list_child_ids(self, db: Session, parent_id: int) -> list[int]:
        rows = self.query(db).with_entities(Folder.id).filter(Folder.parent_id == parent_id).all()
        return [row[0] for row in rows]

    def find_sibling(
        self,
        db: Session,
        *,
        parent_id: Optional[int],
        name: str,
        status: str,
        exclude_id: Optional[int] = None,
    ) -> Optional[Folder]:
        """查找同一父目录下同名、同状态的文件夹；根目录按 ``IS NULL`` 精确匹配。"""
        query = self.query(db).filter(Folder.name == name, Folder.status == status)
        if parent_id is None:
            query = query.filter(Folder.parent_id.is_(None))
        else:
            query = query.filter(Folder.parent_id == parent_id)
        if exclude_id is not None:
            query = query.filter(Folder.id != exclude_id)
        return query.first()

    def get_parent_id(self, db: Session, folder_id: int, *, lock: bool = False) -> tuple[bool, Optional[int]]:
        """返回 ``(是否存在, parent_id)``，只取单列避免加载整行。"""
        query = self.query(db).with_entities(Folder.parent_id).filter(Folder.id == folder_id)
        if lock:
            query = query.with_for_update()
        row = query.first()
        if row is None:
            return False, None
        return True, row[0]

    def delete_by_ids(self, db: Session, ids: Iterable[int]) -> int:
        id_list = list(ids)
        if not id_list:
            return 0
        result = db.execute(delete(Folder).where(Folder.id.in_(id_list)).execution_options(synchronize_session=False))
        return int(result.rowcount or 0)


folder_crud = CRUDFolder(Folder)
