"""审计日志服务：记录成功变更的描述，以及分页查询。

记录是“发后即忘”的：写入失败只告警并单独回滚，绝不影响主操作。
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.packages.drive.core.enums import AuditActionEnum
from app.packages.drive.core.logger import logger
from app.packages.drive.core.responses import create_response
from app.packages.drive.core.timezone import format_datetime
from app.packages.drive.crud.logs import activity_log_crud
from app.packages.drive.db.session import transaction


class LogService:
    def record(
        self,
        db: Session,
        *,
        user_id: Optional[int],
        action: AuditActionEnum,
        description: str,
    ) -> None:
        try:
            with transaction(db):
                activity_log_crud.create(
                    db,
                    {"user_id": user_id, "action": action.value, "description": description},
                )
        except SQLAlchemyError as exc:
            logger.warning("Failed to record audit log %s for user %s: %s", action.value, user_id, exc)

    def list_logs(self, db: Session, *, page: int = 1, page_size: int = 20) -> dict:
        page = max(page, 1)
        page_size = max(page_size, 1)
        rows, total = activity_log_crud.list_with_user(db, skip=(page - 1) * page_size, limit=page_size)
        items = [
            {
                "id": log.id,
                "userId": log.user_id,
                "action": log.action,
                "description": log.description,
                "timestamp": format_datetime(log.timestamp),
                "userFullName": full_name,
            }
            for log, full_name in rows
        ]
        payload = {"total": total, "items": items, "page": page, "page_size": page_size}
        return create_response("获取操作日志成功", payload)


log_service = LogService()
