"""模型包初始化，便于统一导入 ORM 实体并触发模型注册。"""

from app.packages.drive.models.activity import Activity
from app.packages.drive.models.folder import Folder
from app.packages.drive.models.log import ActivityLog
from app.packages.drive.models.report import Report
from app.packages.drive.models.user import User

__all__ = [
    "Activity",
    "ActivityLog",
    "Folder",
    "Report",
    "User",
]
