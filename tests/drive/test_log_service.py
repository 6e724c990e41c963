"""审计日志服务的测试。"""

from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from app.packages.drive.core.enums import AuditActionEnum
from app.packages.drive.crud.logs import activity_log_crud
from app.packages.drive.crud.users import user_crud
from app.packages.drive.services.folder_service import folder_service
from app.packages.drive.services.log_service import log_service


def test_record_and_list_logs_with_user_name(db_session_fixture: Session):
    admin = user_crud.get_by_username(db_session_fixture, "admin")
    log_service.record(db_session_fixture, user_id=admin.id, action=AuditActionEnum.CREATE_FOLDER, description="first")
    log_service.record(db_session_fixture, user_id=admin.id, action=AuditActionEnum.DELETE_FOLDER, description="second")

    payload = log_service.list_logs(db_session_fixture, page=1, page_size=1)

    assert payload["code"] == 200
    data = payload["data"]
    assert data["total"] == 2
    assert len(data["items"]) == 1
    item = data["items"][0]
    assert item["description"] == "second"
    assert item["action"] == "DELETE_FOLDER"
    assert item["userFullName"] == "System Admin"


def test_record_failure_does_not_raise(db_session_fixture: Session, monkeypatch):
    def broken_create(db, obj_in):
        raise OperationalError("INSERT INTO activity_logs", {}, Exception("disk full"))

    monkeypatch.setattr(activity_log_crud, "create", broken_create)

    log_service.record(db_session_fixture, user_id=None, action=AuditActionEnum.LOGIN, description="ignored")

    # 会话在失败后仍可继续使用
    folder = folder_service.create(db_session_fixture, name="after", parent_id=None, created_by=None)
    assert folder.id is not None
