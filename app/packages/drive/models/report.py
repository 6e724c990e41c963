"""文件（报表）模型：元数据 + base64 编码的内容，folder_id 为空表示位于根目录。"""

from typing import Optional

from sqlalchemy import BigInteger, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.packages.drive.core.enums import NodeStatusEnum
from app.packages.drive.models.base import Base, CreatedAtMixin


class Report(CreatedAtMixin, Base):
    __tablename__ = "reports"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    file_type: Mapped[str] = mapped_column(String(255), nullable=False)
    file_size: Mapped[int] = mapped_column(BigInteger, default=0)
    file_data: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    folder_id: Mapped[Optional[int]] = mapped_column(ForeignKey("folders.id"), nullable=True, index=True)
    status: Mapped[str] = mapped_column(String(16), default=NodeStatusEnum.ACTIVE.value, index=True)
    uploaded_by: Mapped[Optional[int]] = mapped_column(ForeignKey("users.id"), nullable=True, index=True)
    activity_id: Mapped[Optional[int]] = mapped_column(ForeignKey("activities.id"), nullable=True, index=True)
    report_year: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    report_month: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
