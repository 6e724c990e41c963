"""枚举定义：约束角色、节点状态与审计动作的可选值。"""

from enum import Enum


class RoleEnum(str, Enum):
    ADMIN = "admin"
    ASSISTANT = "assistant"


class UserStatusEnum(str, Enum):
    ACTIVE = "active"
    DISABLED = "disabled"


class NodeStatusEnum(str, Enum):
    """文件夹与文件共用的状态：删除为物理删除，不在此枚举内。"""

    ACTIVE = "active"
    ARCHIVED = "archived"


class ActivityStatusEnum(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    OVERDUE = "overdue"


class AuditActionEnum(str, Enum):
    """审计日志的动作类型。"""

    LOGIN = "LOGIN"
    LOGOUT = "LOGOUT"
    CREATE_FOLDER = "CREATE_FOLDER"
    RENAME_FOLDER = "RENAME_FOLDER"
    MOVE_FOLDER = "MOVE_FOLDER"
    DELETE_FOLDER = "DELETE_FOLDER"
    ARCHIVE_FOLDER = "ARCHIVE_FOLDER"
    RESTORE_FOLDER = "RESTORE_FOLDER"
    UPLOAD_REPORT = "UPLOAD_REPORT"
    UPDATE_REPORT = "UPDATE_REPORT"
    MOVE_REPORTS = "MOVE_REPORTS"
    DELETE_REPORT = "DELETE_REPORT"
    BULK_RESTORE = "BULK_RESTORE"
    BULK_DELETE = "BULK_DELETE"
    BULK_ARCHIVE = "BULK_ARCHIVE"
    BULK_MOVE = "BULK_MOVE"


class BulkOutcomeEnum(str, Enum):
    """批量操作的整体结果。"""

    SUCCESS = "success"
    PARTIAL = "partial"
    FAILURE = "failure"
