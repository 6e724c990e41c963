"""文件夹树服务：负责目录层级的全部不变量。

- 同一父目录下同状态的文件夹不得重名（创建/重命名/移动/恢复时校验）；
- 移动不得产生环：从目标父目录沿 parent_id 向上回溯，遇到自身即拒绝；
- 目录层级不得超过 ``FOLDER_MAX_DEPTH``（创建与移动时校验），回溯超限一律拒绝；
- 删除为物理删除：深度优先，先子后父，连同各层目录内的文件一并删除；
- 归档/恢复只翻转单个文件夹的状态，不级联到子目录。

每个单项操作的“校验 + 写入”都包在同一个 ``transaction`` 作用域内；
目录树不做内存缓存，所有遍历都直接查询持久化的 parent_id 关系。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.packages.drive.core.config import get_settings
from app.packages.drive.core.enums import NodeStatusEnum
from app.packages.drive.core.exceptions import (
    CycleError,
    DuplicateNameError,
    InvalidOperationError,
    NotFoundError,
)
from app.packages.drive.core.logger import logger
from app.packages.drive.crud.folders import folder_crud
from app.packages.drive.crud.reports import report_crud
from app.packages.drive.db.session import transaction
from app.packages.drive.models.folder import SIBLING_NAME_INDEX, Folder
from app.packages.drive.utils.folder_filter import FolderFilter


@dataclass
class FolderDeletion:
    """一次递归删除的结果：按删除顺序（先子后父）列出文件夹 ID。"""

    folder_ids: list[int] = field(default_factory=list)
    reports_deleted: int = 0


class FolderService:
    # ----------------------------
    # 查询
    # ----------------------------
    def get(self, db: Session, folder_id: int) -> Folder:
        folder = folder_crud.get(db, folder_id)
        if folder is None:
            raise NotFoundError("文件夹不存在或已删除")
        return folder

    def list_folders(
        self,
        db: Session,
        *,
        parent: FolderFilter,
        status: Optional[str] = None,
    ) -> list[Folder]:
        return folder_crud.list_by_parent(db, parent=parent, status=self._normalize_status(status) if status else None)

    def get_path(self, db: Session, folder_id: int) -> list[Folder]:
        """返回从根到 ``folder_id`` 的文件夹序列（面包屑）。

        遇到缺失的父行即视为链路结束；父链成环（脏数据）时在重复节点处终止。
        层级超过 ``FOLDER_MAX_DEPTH`` 时拒绝，不返回截断的路径。
        """
        self.get(db, folder_id)
        max_depth = get_settings().folder_max_depth

        path: list[Folder] = []
        seen: set[int] = set()
        current_id: Optional[int] = folder_id
        while current_id is not None:
            if current_id in seen:
                logger.warning("folder.path corrupted parent chain folder_id=%s at=%s", folder_id, current_id)
                break
            if len(path) >= max_depth:
                logger.warning("folder.path exceeds max depth folder_id=%s max_depth=%s", folder_id, max_depth)
                raise InvalidOperationError(f"文件夹层级超过 {max_depth} 层，无法解析路径")
            seen.add(current_id)
            folder = folder_crud.get(db, current_id)
            if folder is None:
                break
            path.append(folder)
            current_id = folder.parent_id
        path.reverse()
        return path

    # ----------------------------
    # 变更
    # ----------------------------
    def create(
        self,
        db: Session,
        *,
        name: str,
        parent_id: Optional[int],
        created_by: Optional[int],
    ) -> Folder:
        clean_name = self._normalize_name(name)
        with transaction(db):
            if parent_id is not None:
                self._require_folder(db, parent_id, message="父文件夹不存在")
                self._assert_depth(self._chain_depth(db, parent_id) + 1)
            self._assert_unique(db, parent_id=parent_id, name=clean_name, status=NodeStatusEnum.ACTIVE.value)
            folder = Folder(
                name=clean_name,
                parent_id=parent_id,
                status=NodeStatusEnum.ACTIVE.value,
                created_by=created_by,
            )
            self._flush_unique(db, folder)
        logger.info("folder.create id=%s name=%s parent_id=%s", folder.id, clean_name, parent_id)
        return folder

    def rename(self, db: Session, *, folder_id: int, name: str) -> Folder:
        clean_name = self._normalize_name(name)
        with transaction(db):
            folder = self._require_folder(db, folder_id, lock=True)
            if folder.name != clean_name:
                self._assert_unique(
                    db,
                    parent_id=folder.parent_id,
                    name=clean_name,
                    status=folder.status,
                    exclude_id=folder.id,
                )
                folder.name = clean_name
                self._flush_unique(db, folder)
        logger.info("folder.rename id=%s name=%s", folder_id, clean_name)
        return folder

    def move(self, db: Session, *, folder_id: int, target_parent_id: Optional[int]) -> Folder:
        if target_parent_id is not None and folder_id == target_parent_id:
            raise InvalidOperationError("不能将文件夹移动到其自身")
        with transaction(db):
            folder = self._require_folder(db, folder_id, lock=True)
            if target_parent_id is not None:
                self._require_folder(db, target_parent_id, message="目标文件夹不存在")
                target_depth = self._chain_depth(db, target_parent_id, moving_id=folder_id)
            else:
                target_depth = 0
            if folder.parent_id != target_parent_id:
                self._assert_depth(target_depth + self._subtree_height(db, folder_id))
                self._assert_unique(
                    db,
                    parent_id=target_parent_id,
                    name=folder.name,
                    status=folder.status,
                    exclude_id=folder.id,
                )
                folder.parent_id = target_parent_id
                self._flush_unique(db, folder)
        logger.info("folder.move id=%s target_parent_id=%s", folder_id, target_parent_id)
        return folder

    def set_status(self, db: Session, *, folder_id: int, status: str) -> Folder:
        """归档或恢复单个文件夹；恢复为 active 时与同级 active 文件夹做重名校验。"""
        new_status = self._normalize_status(status)
        with transaction(db):
            folder = self._require_folder(db, folder_id, lock=True)
            if folder.status != new_status:
                if new_status == NodeStatusEnum.ACTIVE.value:
                    self._assert_unique(
                        db,
                        parent_id=folder.parent_id,
                        name=folder.name,
                        status=new_status,
                        exclude_id=folder.id,
                    )
                folder.status = new_status
                self._flush_unique(db, folder)
        logger.info("folder.status id=%s status=%s", folder_id, new_status)
        return folder

    def delete(self, db: Session, folder_id: int) -> FolderDeletion:
        """递归物理删除整棵子树及其中的文件；整体成功或整体回滚。"""
        result = FolderDeletion()
        with transaction(db):
            self._require_folder(db, folder_id, lock=True)
            for current_id in self._collect_subtree(db, folder_id):
                result.reports_deleted += report_crud.delete_in_folders(db, [current_id])
                folder_crud.delete_by_ids(db, [current_id])
                result.folder_ids.append(current_id)
        logger.info(
            "folder.delete id=%s folders=%s reports=%s",
            folder_id,
            len(result.folder_ids),
            result.reports_deleted,
        )
        return result

    # ----------------------------
    # 内部：校验与遍历
    # ----------------------------
    def _require_folder(
        self,
        db: Session,
        folder_id: int,
        *,
        lock: bool = False,
        message: str = "文件夹不存在或已删除",
    ) -> Folder:
        folder = folder_crud.get_for_update(db, folder_id) if lock else folder_crud.get(db, folder_id)
        if folder is None:
            raise NotFoundError(message)
        return folder

    def _normalize_name(self, name: Optional[str]) -> str:
        clean = (name or "").strip()
        if not clean:
            raise InvalidOperationError("文件夹名称不能为空")
        max_length = get_settings().folder_name_max_length
        if len(clean) > max_length:
            raise InvalidOperationError(f"文件夹名称不能超过 {max_length} 个字符")
        return clean

    @staticmethod
    def _normalize_status(status: Optional[str]) -> str:
        value = (status or "").strip().lower()
        if value not in {item.value for item in NodeStatusEnum}:
            raise InvalidOperationError(f"不支持的状态：{status}")
        return value

    def _assert_unique(
        self,
        db: Session,
        *,
        parent_id: Optional[int],
        name: str,
        status: str,
        exclude_id: Optional[int] = None,
    ) -> None:
        clash = folder_crud.find_sibling(db, parent_id=parent_id, name=name, status=status, exclude_id=exclude_id)
        if clash is not None:
            raise DuplicateNameError.for_folder(name)

    def _chain_depth(self, db: Session, folder_id: int, *, moving_id: Optional[int] = None) -> int:
        """沿 ``folder_id`` 的 parent_id 链向上回溯，返回其层级（根层为 1）。

        传入 ``moving_id`` 时兼做环检测：链上出现它即为环。
        回溯路径上的行以 FOR UPDATE 读取，使并发的交叉移动串行化。
        链路超过 ``FOLDER_MAX_DEPTH`` 或自身成环（脏数据）时直接拒绝，不放行写入。
        """
        max_depth = get_settings().folder_max_depth
        seen: set[int] = set()
        current: Optional[int] = folder_id
        while current is not None:
            if current == moving_id:
                raise CycleError("不能将文件夹移动到其自身或其子文件夹中")
            if current in seen:
                logger.warning("folder.chain corrupted parent chain from=%s at=%s", folder_id, current)
                raise InvalidOperationError("文件夹层级关系异常，无法完成操作")
            if len(seen) >= max_depth:
                logger.warning("folder.chain exceeds max depth from=%s max_depth=%s", folder_id, max_depth)
                raise InvalidOperationError(f"文件夹层级不能超过 {max_depth} 层")
            seen.add(current)
            exists, current = folder_crud.get_parent_id(db, current, lock=True)
            if not exists:
                break
        return len(seen)

    def _subtree_height(self, db: Session, root_id: int) -> int:
        """子树的层数，只有自身时为 1。"""
        height = 0
        visited = {root_id}
        level = [root_id]
        while level:
            height += 1
            next_level: list[int] = []
            for node_id in level:
                for child_id in folder_crud.list_child_ids(db, node_id):
                    if child_id not in visited:
                        visited.add(child_id)
                        next_level.append(child_id)
            level = next_level
        return height

    @staticmethod
    def _assert_depth(depth: int) -> None:
        max_depth = get_settings().folder_max_depth
        if depth > max_depth:
            raise InvalidOperationError(f"文件夹层级不能超过 {max_depth} 层")

    def _collect_subtree(self, db: Session, root_id: int) -> list[int]:
        """深度优先收集子树，返回“先子后父”的后序序列。"""
        order: list[int] = []
        visited = {root_id}
        stack: list[tuple[int, bool]] = [(root_id, False)]
        while stack:
            node_id, expanded = stack.pop()
            if expanded:
                order.append(node_id)
                continue
            stack.append((node_id, True))
            for child_id in folder_crud.list_child_ids(db, node_id):
                if child_id in visited:
                    logger.warning("folder.delete corrupted tree: %s revisited under %s", child_id, node_id)
                    continue
                visited.add(child_id)
                stack.append((child_id, False))
        return order

    def _flush_unique(self, db: Session, folder: Folder) -> None:
        """写入并刷新；唯一索引冲突（并发写入者抢先）转换为重名错误。"""
        try:
            folder_crud.save(db, folder)
        except IntegrityError as exc:
            if SIBLING_NAME_INDEX not in str(exc.orig):
                raise
            logger.warning("folder.unique_violation name=%s parent_id=%s: %s", folder.name, folder.parent_id, exc.orig)
            raise DuplicateNameError.for_folder(folder.name) from exc
        db.refresh(folder)


folder_service = FolderService()
