"""文件放置服务与活动协作方的测试。"""

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from app.packages.drive.core.exceptions import InvalidOperationError, NotFoundError
from app.packages.drive.models.activity import Activity
from app.packages.drive.models.report import Report
from app.packages.drive.services.folder_service import folder_service
from app.packages.drive.services.report_service import ReportService, report_service
from app.packages.drive.utils.folder_filter import ALL, ROOT, Specific


def _payload(title: str, **extra) -> dict:
    data = {
        "title": title,
        "file_name": f"{title}.xlsx",
        "file_type": "application/vnd.ms-excel",
        "file_size": 5,
        "file_data": "aGVsbG8=",
    }
    data.update(extra)
    return data


def _activity(db: Session, title: str = "Monthly report") -> Activity:
    activity = Activity(title=title, status="pending")
    db.add(activity)
    db.commit()
    db.refresh(activity)
    return activity


def test_root_filter_returns_only_unfiled_reports(db_session_fixture: Session):
    folder = folder_service.create(db_session_fixture, name="F", parent_id=None, created_by=None)
    at_root = report_service.create(db_session_fixture, payload=_payload("root"), uploaded_by=None)
    inside = report_service.create(db_session_fixture, payload=_payload("inside", folder_id=folder.id), uploaded_by=None)

    assert [item.id for item in report_service.list_reports(db_session_fixture, folder=ROOT)] == [at_root.id]
    assert [item.id for item in report_service.list_reports(db_session_fixture, folder=Specific(folder.id))] == [inside.id]
    assert {item.id for item in report_service.list_reports(db_session_fixture, folder=ALL)} == {at_root.id, inside.id}


def test_status_filter_is_exact(db_session_fixture: Session):
    active = report_service.create(db_session_fixture, payload=_payload("a"), uploaded_by=None)
    archived = report_service.create(db_session_fixture, payload=_payload("b", status="archived"), uploaded_by=None)

    assert [item.id for item in report_service.list_reports(db_session_fixture, folder=ALL, status="active")] == [active.id]
    assert [item.id for item in report_service.list_reports(db_session_fixture, folder=ALL, status="archived")] == [
        archived.id
    ]


def test_duplicate_report_names_in_one_folder_are_allowed(db_session_fixture: Session):
    folder = folder_service.create(db_session_fixture, name="Same", parent_id=None, created_by=None)
    first = report_service.create(db_session_fixture, payload=_payload("dup", folder_id=folder.id), uploaded_by=None)
    second = report_service.create(db_session_fixture, payload=_payload("dup", folder_id=folder.id), uploaded_by=None)
    third = report_service.create(db_session_fixture, payload=_payload("dup"), uploaded_by=None)

    moved = report_service.move_many(db_session_fixture, report_ids=[third.id], target_folder_id=folder.id)

    assert moved == 1
    titles = [item.title for item in report_service.list_reports(db_session_fixture, folder=Specific(folder.id))]
    assert titles == ["dup", "dup", "dup"]
    assert first.id != second.id


def test_create_validates_folder_and_activity(db_session_fixture: Session):
    with pytest.raises(NotFoundError):
        report_service.create(db_session_fixture, payload=_payload("x", folder_id=999999), uploaded_by=None)
    with pytest.raises(NotFoundError):
        report_service.create(db_session_fixture, payload=_payload("x", activity_id=999999), uploaded_by=None)
    with pytest.raises(InvalidOperationError):
        report_service.create(db_session_fixture, payload=_payload("x", owner="me"), uploaded_by=None)
    assert report_service.list_reports(db_session_fixture, folder=ALL) == []


def test_update_renames_and_refiles(db_session_fixture: Session):
    folder = folder_service.create(db_session_fixture, name="Dest", parent_id=None, created_by=None)
    report = report_service.create(db_session_fixture, payload=_payload("draft"), uploaded_by=None)

    updated = report_service.update(
        db_session_fixture,
        report_id=report.id,
        changes={"title": " final ", "folder_id": folder.id, "status": "archived"},
    )

    assert updated.title == "final"
    assert updated.folder_id == folder.id
    assert updated.status == "archived"

    back = report_service.update(db_session_fixture, report_id=report.id, changes={"folder_id": None})
    assert back.folder_id is None

    with pytest.raises(NotFoundError):
        report_service.update(db_session_fixture, report_id=report.id, changes={"folder_id": 777777})
    with pytest.raises(InvalidOperationError):
        report_service.update(db_session_fixture, report_id=report.id, changes={"title": "  "})
    with pytest.raises(NotFoundError):
        report_service.update(db_session_fixture, report_id=888888, changes={"title": "x"})


def test_move_many_counts_existing_rows_only(db_session_fixture: Session):
    folder = folder_service.create(db_session_fixture, name="Bin", parent_id=None, created_by=None)
    r1 = report_service.create(db_session_fixture, payload=_payload("r1"), uploaded_by=None)
    r2 = report_service.create(db_session_fixture, payload=_payload("r2"), uploaded_by=None)

    moved = report_service.move_many(
        db_session_fixture,
        report_ids=[r1.id, r2.id, r2.id, 555555],
        target_folder_id=folder.id,
    )

    assert moved == 2
    assert {item.id for item in report_service.list_reports(db_session_fixture, folder=Specific(folder.id))} == {
        r1.id,
        r2.id,
    }
    with pytest.raises(NotFoundError):
        report_service.move_many(db_session_fixture, report_ids=[r1.id], target_folder_id=666666)


def test_delete_report(db_session_fixture: Session):
    report = report_service.create(db_session_fixture, payload=_payload("gone"), uploaded_by=None)
    report_id = report.id

    report_service.delete(db_session_fixture, report_id)

    with pytest.raises(NotFoundError):
        report_service.get(db_session_fixture, report_id)
    with pytest.raises(NotFoundError):
        report_service.delete(db_session_fixture, report_id)


def test_read_content_decodes_base64(db_session_fixture: Session):
    report = report_service.create(db_session_fixture, payload=_payload("bytes"), uploaded_by=None)
    assert report_service.read_content(report) == b"hello"

    empty = report_service.create(db_session_fixture, payload=_payload("empty", file_data=None), uploaded_by=None)
    assert report_service.read_content(empty) == b""

    broken = report_service.create(db_session_fixture, payload=_payload("broken", file_data="@@@"), uploaded_by=None)
    with pytest.raises(InvalidOperationError):
        report_service.read_content(broken)


def test_linking_report_completes_activity_once(db_session_fixture: Session):
    activity = _activity(db_session_fixture)
    admin_id = 1

    report_service.create(db_session_fixture, payload=_payload("submit", activity_id=activity.id), uploaded_by=admin_id)
    db_session_fixture.refresh(activity)
    assert activity.status == "completed"
    assert activity.completed_by == admin_id
    first_completion = activity.completion_date
    assert first_completion is not None

    report_service.create(db_session_fixture, payload=_payload("again", activity_id=activity.id), uploaded_by=None)
    db_session_fixture.refresh(activity)
    assert activity.completion_date == first_completion
    assert activity.completed_by == admin_id


def test_activity_hook_failure_keeps_report(db_session_fixture: Session):
    activity = _activity(db_session_fixture)

    def failing_hook(db, **kwargs):
        raise OperationalError("UPDATE activities", {}, Exception("database is locked"))

    service = ReportService(on_activity_linked=failing_hook)
    report = service.create(db_session_fixture, payload=_payload("kept", activity_id=activity.id), uploaded_by=None)

    assert db_session_fixture.get(Report, report.id) is not None
    db_session_fixture.refresh(activity)
    assert activity.status == "pending"
