"""审计日志 CRUD：按时间倒序分页，并关联出操作人姓名。"""

from __future__ import annotations

from sqlalchemy.orm import Session

from app.packages.drive.crud.base import CRUDBase
from app.packages.drive.models.log import ActivityLog
from app.packages.drive.models.user import User


class CRUDActivityLog(CRUDBase[ActivityLog]):
    def list_with_user(self, db: Session, *, skip: int = 0, limit: int = 20) -> tuple[list[tuple[ActivityLog, str | None]], int]:
        base = self.query(db)
        total = base.count()
        rows = (
            db.query(ActivityLog, User.full_name)
            .outerjoin(User, User.id == ActivityLog.user_id)
            .order_by(ActivityLog.timestamp.desc(), ActivityLog.id.desc())
            .offset(max(skip, 0))
            .limit(max(limit, 1))
            .all()
        )
        return [(log, full_name) for log, full_name in rows], total


activity_log_crud = CRUDActivityLog(ActivityLog)
