"""用户模型：提供身份与角色，供文件夹/文件记录创建人以及管理员权限判定。"""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.packages.drive.core.enums import RoleEnum, UserStatusEnum
from app.packages.drive.models.base import Base, CreatedAtMixin


class User(CreatedAtMixin, Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    username: Mapped[str] = mapped_column(String(50), unique=True, index=True)
    hashed_password: Mapped[str] = mapped_column(String(255))
    full_name: Mapped[str] = mapped_column(String(100))
    # admin | assistant
    role: Mapped[str] = mapped_column(String(20), default=RoleEnum.ASSISTANT.value)
    status: Mapped[str] = mapped_column(String(20), default=UserStatusEnum.ACTIVE.value, index=True)

    @property
    def is_active(self) -> bool:
        return self.status == UserStatusEnum.ACTIVE.value

    @property
    def is_admin(self) -> bool:
        return self.role == RoleEnum.ADMIN.value
