"""活动协作方：接收“文件已关联到活动”的事件，并把活动标记为已完成。"""

from __future__ import annotations

from typing import Optional

from sqlalchemy.orm import Session

from app.packages.drive.core.enums import ActivityStatusEnum
from app.packages.drive.core.logger import logger
from app.packages.drive.core.timezone import now as tz_now
from app.packages.drive.crud.activities import activity_crud
from app.packages.drive.db.session import transaction


class ActivityService:
    def on_report_linked(
        self,
        db: Session,
        *,
        activity_id: int,
        report_id: int,
        user_id: Optional[int],
    ) -> bool:
        """幂等地完成活动：已完成则不再改写，返回本次是否发生了状态变更。"""
        with transaction(db):
            activity = activity_crud.get_for_update(db, activity_id)
            if activity is None:
                logger.warning("activity.linked missing activity_id=%s report_id=%s", activity_id, report_id)
                return False
            if activity.status == ActivityStatusEnum.COMPLETED.value:
                return False
            activity_crud.update(
                db,
                activity,
                {
                    "status": ActivityStatusEnum.COMPLETED.value,
                    "completion_date": tz_now(),
                    "completed_by": user_id,
                },
            )
        logger.info("activity.completed id=%s report_id=%s user_id=%s", activity_id, report_id, user_id)
        return True


activity_service = ActivityService()
