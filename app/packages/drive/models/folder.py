"""文件夹模型：通过 parent_id 自引用外键表达目录树，不在内存中缓存树结构。

约束：
- 同一父目录下处于 active 状态的文件夹不允许重名（根目录 parent_id 为 NULL，
  索引里按 0 参与比较，保证根目录同样受约束）；
- 归档（archived）只是状态标记，删除是物理删除并递归到整棵子树。
"""

from typing import Optional

from sqlalchemy import ForeignKey, Index, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from app.packages.drive.core.enums import NodeStatusEnum
from app.packages.drive.models.base import Base, CreatedAtMixin


class Folder(CreatedAtMixin, Base):
    __tablename__ = "folders"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    # NULL 表示位于根目录
    parent_id: Mapped[Optional[int]] = mapped_column(ForeignKey("folders.id"), nullable=True, index=True)
    status: Mapped[str] = mapped_column(String(16), default=NodeStatusEnum.ACTIVE.value, index=True)
    created_by: Mapped[Optional[int]] = mapped_column(ForeignKey("users.id"), nullable=True, index=True)

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<Folder id={self.id} name={self.name!r} parent_id={self.parent_id} status={self.status}>"


_ACTIVE_ONLY = Folder.status == NodeStatusEnum.ACTIVE.value

SIBLING_NAME_INDEX = "uq_folders_active_sibling_name"

Index(
    SIBLING_NAME_INDEX,
    func.coalesce(Folder.parent_id, 0),
    Folder.name,
    unique=True,
    postgresql_where=_ACTIVE_ONLY,
    sqlite_where=_ACTIVE_ONLY,
)
