"""批量操作协调器：把多个单项操作聚合成一个结果。

所有批量操作采用同一策略：先文件夹后文件，逐项独立提交（每项一个事务），
单项的业务错误（``DriveError``）被记录后继续处理剩余项；存储层错误仍视为致命并中断整个批次。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Optional

from sqlalchemy.orm import Session

from app.packages.drive.core.enums import BulkOutcomeEnum, NodeStatusEnum
from app.packages.drive.core.exceptions import DriveError, DuplicateNameError, NotFoundError
from app.packages.drive.core.logger import logger
from app.packages.drive.services.folder_service import folder_service
from app.packages.drive.services.report_service import report_service

FOLDER_KIND = "folder"
FILE_KIND = "file"


@dataclass
class BulkItemError:
    kind: str
    id: int
    message: str
    code: int

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "id": self.id, "message": self.message, "code": self.code}


@dataclass
class BulkResult:
    """批量操作的聚合结果。

    ``skipped`` 记录按“无需处理”跳过的项（例如删除时已随祖先目录一并删除的节点），
    它们既不计入成功也不计入失败。
    """

    verb: str
    folders: int = 0
    files: int = 0
    skipped: list[dict[str, Any]] = field(default_factory=list)
    errors: list[BulkItemError] = field(default_factory=list)

    @property
    def succeeded(self) -> int:
        return self.folders + self.files

    @property
    def first_error(self) -> Optional[str]:
        return self.errors[0].message if self.errors else None

    @property
    def outcome(self) -> BulkOutcomeEnum:
        if not self.errors:
            return BulkOutcomeEnum.SUCCESS
        if self.succeeded:
            return BulkOutcomeEnum.PARTIAL
        return BulkOutcomeEnum.FAILURE

    @property
    def only_duplicates(self) -> bool:
        return bool(self.errors) and all(error.code == DuplicateNameError.default_code for error in self.errors)

    def summary(self, label: str) -> str:
        counts = f"{label} {self.folders} 个文件夹、{self.files} 个文件"
        if self.outcome is BulkOutcomeEnum.SUCCESS:
            return f"已{counts}"
        if self.outcome is BulkOutcomeEnum.PARTIAL:
            return f"部分成功：已{counts}，{len(self.errors)} 项失败：{self.first_error}"
        return self.first_error or "批量操作失败"

    def to_dict(self) -> dict[str, Any]:
        return {
            f"{self.verb}Folders": self.folders,
            f"{self.verb}Files": self.files,
            "skipped": list(self.skipped),
            "errors": [error.to_dict() for error in self.errors],
            "firstError": self.first_error,
            "outcome": self.outcome.value,
        }

    def record_error(self, kind: str, item_id: int, exc: DriveError) -> None:
        logger.warning("bulk.%s %s %s failed: %s", self.verb, kind, item_id, exc.msg)
        self.errors.append(BulkItemError(kind=kind, id=item_id, message=exc.msg, code=exc.status_code))


def _unique(ids: Optional[Iterable[int]]) -> list[int]:
    return list(dict.fromkeys(ids or []))


class BulkService:
    def bulk_restore(self, db: Session, *, folder_ids: Iterable[int], report_ids: Iterable[int]) -> BulkResult:
        """恢复为 active；文件夹逐个做同级重名校验，冲突项保持 archived。"""
        return self._run(
            "restored",
            folder_ids,
            report_ids,
            folder_op=lambda item_id: folder_service.set_status(
                db, folder_id=item_id, status=NodeStatusEnum.ACTIVE.value
            ),
            report_op=lambda item_id: report_service.set_status(
                db, report_id=item_id, status=NodeStatusEnum.ACTIVE.value
            ),
        )

    def bulk_archive(self, db: Session, *, folder_ids: Iterable[int], report_ids: Iterable[int]) -> BulkResult:
        return self._run(
            "archived",
            folder_ids,
            report_ids,
            folder_op=lambda item_id: folder_service.set_status(
                db, folder_id=item_id, status=NodeStatusEnum.ARCHIVED.value
            ),
            report_op=lambda item_id: report_service.set_status(
                db, report_id=item_id, status=NodeStatusEnum.ARCHIVED.value
            ),
        )

    def bulk_delete(self, db: Session, *, folder_ids: Iterable[int], report_ids: Iterable[int]) -> BulkResult:
        """物理删除；已不存在的项（常见于已随祖先文件夹一并删除）记为 skipped。"""
        return self._run(
            "deleted",
            folder_ids,
            report_ids,
            folder_op=lambda item_id: folder_service.delete(db, item_id),
            report_op=lambda item_id: report_service.delete(db, item_id),
            skip_missing=True,
        )

    def bulk_move(
        self,
        db: Session,
        *,
        report_ids: Iterable[int],
        folder_ids: Iterable[int],
        target_parent_id: Optional[int],
    ) -> BulkResult:
        """文件通过 ``move_many`` 一次性改挂（不做重名校验）；文件夹逐个移动并校验重名与环。

        目标文件夹不存在时整个批次直接失败，不做任何写入。
        """
        if target_parent_id is not None:
            folder_service.get(db, target_parent_id)

        result = BulkResult(verb="moved")
        reports = _unique(report_ids)
        if reports:
            result.files = report_service.move_many(db, report_ids=reports, target_folder_id=target_parent_id)
        for folder_id in _unique(folder_ids):
            try:
                folder_service.move(db, folder_id=folder_id, target_parent_id=target_parent_id)
            except DriveError as exc:
                result.record_error(FOLDER_KIND, folder_id, exc)
            else:
                result.folders += 1
        self._log(result)
        return result

    # ----------------------------
    # 内部
    # ----------------------------
    def _run(
        self,
        verb: str,
        folder_ids: Iterable[int],
        report_ids: Iterable[int],
        *,
        folder_op: Callable[[int], Any],
        report_op: Callable[[int], Any],
        skip_missing: bool = False,
    ) -> BulkResult:
        result = BulkResult(verb=verb)
        for kind, ids, op in (
            (FOLDER_KIND, _unique(folder_ids), folder_op),
            (FILE_KIND, _unique(report_ids), report_op),
        ):
            for item_id in ids:
                try:
                    op(item_id)
                except NotFoundError as exc:
                    if not skip_missing:
                        result.record_error(kind, item_id, exc)
                        continue
                    result.skipped.append({"kind": kind, "id": item_id})
                except DriveError as exc:
                    result.record_error(kind, item_id, exc)
                else:
                    if kind == FOLDER_KIND:
                        result.folders += 1
                    else:
                        result.files += 1
        self._log(result)
        return result

    def _log(self, result: BulkResult) -> None:
        logger.info(
            "bulk.%s outcome=%s folders=%s files=%s skipped=%s errors=%s",
            result.verb,
            result.outcome.value,
            result.folders,
            result.files,
            len(result.skipped),
            len(result.errors),
        )


bulk_service = BulkService()
