"""文件夹树服务的单元测试：重名、环检测、递归删除与路径解析。"""

import pytest
from sqlalchemy import update
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from app.packages.drive.core.config import get_settings
from app.packages.drive.core.exceptions import (
    CycleError,
    DuplicateNameError,
    InvalidOperationError,
    NotFoundError,
)
from app.packages.drive.crud.folders import folder_crud
from app.packages.drive.models.folder import Folder
from app.packages.drive.models.report import Report
from app.packages.drive.services.folder_service import folder_service
from app.packages.drive.services.report_service import report_service
from app.packages.drive.utils.folder_filter import ALL, ROOT, Specific


def _folder(db: Session, name: str, parent_id=None) -> Folder:
    return folder_service.create(db, name=name, parent_id=parent_id, created_by=None)


def _report(db: Session, title: str, folder_id=None, status: str = "active") -> Report:
    return report_service.create(
        db,
        payload={
            "title": title,
            "file_name": f"{title}.pdf",
            "file_type": "application/pdf",
            "file_size": 3,
            "file_data": "YWJj",
            "folder_id": folder_id,
            "status": status,
        },
        uploaded_by=None,
    )


def test_duplicate_root_folder_is_rejected_and_first_kept(db_session_fixture: Session):
    first = _folder(db_session_fixture, "Reports")

    with pytest.raises(DuplicateNameError) as exc_info:
        _folder(db_session_fixture, "Reports")

    assert exc_info.value.status_code == 409
    assert "Reports" in exc_info.value.msg
    roots = folder_service.list_folders(db_session_fixture, parent=ROOT)
    assert [(item.id, item.name) for item in roots] == [(first.id, "Reports")]


def test_same_name_allowed_under_different_parents(db_session_fixture: Session):
    a = _folder(db_session_fixture, "A")
    b = _folder(db_session_fixture, "B")

    first = _folder(db_session_fixture, "2024", parent_id=a.id)
    second = _folder(db_session_fixture, "2024", parent_id=b.id)

    assert first.id != second.id
    assert first.parent_id == a.id and second.parent_id == b.id


def test_create_normalizes_and_validates_name(db_session_fixture: Session):
    folder = _folder(db_session_fixture, "  Q1  ")
    assert folder.name == "Q1"

    with pytest.raises(InvalidOperationError):
        _folder(db_session_fixture, "   ")
    with pytest.raises(InvalidOperationError):
        _folder(db_session_fixture, "x" * 256)


def test_create_under_missing_parent_raises_not_found(db_session_fixture: Session):
    with pytest.raises(NotFoundError):
        _folder(db_session_fixture, "orphan", parent_id=987654)


def test_archived_sibling_does_not_block_create_but_blocks_restore(db_session_fixture: Session):
    archived = _folder(db_session_fixture, "Budget")
    folder_service.set_status(db_session_fixture, folder_id=archived.id, status="archived")

    active = _folder(db_session_fixture, "Budget")
    assert active.status == "active"

    with pytest.raises(DuplicateNameError):
        folder_service.set_status(db_session_fixture, folder_id=archived.id, status="active")
    assert folder_service.get(db_session_fixture, archived.id).status == "archived"


def test_archive_never_checks_names(db_session_fixture: Session):
    first = _folder(db_session_fixture, "Old")
    folder_service.set_status(db_session_fixture, folder_id=first.id, status="archived")
    second = _folder(db_session_fixture, "Old")

    archived = folder_service.set_status(db_session_fixture, folder_id=second.id, status="archived")

    assert archived.status == "archived"
    assert len(folder_service.list_folders(db_session_fixture, parent=ROOT, status="archived")) == 2


def test_set_status_rejects_unknown_value(db_session_fixture: Session):
    folder = _folder(db_session_fixture, "S")
    with pytest.raises(InvalidOperationError):
        folder_service.set_status(db_session_fixture, folder_id=folder.id, status="trashed")


def test_rename_checks_active_siblings(db_session_fixture: Session):
    _folder(db_session_fixture, "Alpha")
    beta = _folder(db_session_fixture, "Beta")

    with pytest.raises(DuplicateNameError):
        folder_service.rename(db_session_fixture, folder_id=beta.id, name="Alpha")
    assert folder_service.get(db_session_fixture, beta.id).name == "Beta"

    # 同名重命名为无操作
    assert folder_service.rename(db_session_fixture, folder_id=beta.id, name="Beta").name == "Beta"


def test_rename_of_archived_folder_is_scoped_to_archived_siblings(db_session_fixture: Session):
    _folder(db_session_fixture, "Live")
    old = _folder(db_session_fixture, "Old")
    folder_service.set_status(db_session_fixture, folder_id=old.id, status="archived")

    renamed = folder_service.rename(db_session_fixture, folder_id=old.id, name="Live")

    assert renamed.name == "Live"
    assert renamed.status == "archived"


def test_move_into_descendant_raises_cycle_and_keeps_parent(db_session_fixture: Session):
    a = _folder(db_session_fixture, "A")
    b = _folder(db_session_fixture, "B", parent_id=a.id)
    c = _folder(db_session_fixture, "C", parent_id=b.id)

    with pytest.raises(CycleError):
        folder_service.move(db_session_fixture, folder_id=a.id, target_parent_id=b.id)
    with pytest.raises(CycleError):
        folder_service.move(db_session_fixture, folder_id=a.id, target_parent_id=c.id)

    assert folder_service.get(db_session_fixture, a.id).parent_id is None


def test_move_into_itself_is_invalid(db_session_fixture: Session):
    a = _folder(db_session_fixture, "A")
    with pytest.raises(InvalidOperationError):
        folder_service.move(db_session_fixture, folder_id=a.id, target_parent_id=a.id)


def test_move_checks_target_existence_and_duplicates(db_session_fixture: Session):
    target = _folder(db_session_fixture, "Target")
    _folder(db_session_fixture, "Docs", parent_id=target.id)
    docs = _folder(db_session_fixture, "Docs")

    with pytest.raises(NotFoundError):
        folder_service.move(db_session_fixture, folder_id=docs.id, target_parent_id=123456)
    with pytest.raises(DuplicateNameError):
        folder_service.move(db_session_fixture, folder_id=docs.id, target_parent_id=target.id)

    other = _folder(db_session_fixture, "Other")
    moved = folder_service.move(db_session_fixture, folder_id=other.id, target_parent_id=target.id)
    assert moved.parent_id == target.id

    back = folder_service.move(db_session_fixture, folder_id=other.id, target_parent_id=None)
    assert back.parent_id is None


def test_move_sideways_within_tree_is_allowed(db_session_fixture: Session):
    a = _folder(db_session_fixture, "A")
    b = _folder(db_session_fixture, "B", parent_id=a.id)
    c = _folder(db_session_fixture, "C", parent_id=a.id)

    moved = folder_service.move(db_session_fixture, folder_id=c.id, target_parent_id=b.id)

    assert moved.parent_id == b.id
    assert [item.name for item in folder_service.get_path(db_session_fixture, c.id)] == ["A", "B", "C"]


def test_recursive_delete_removes_subtree_and_reports(db_session_fixture: Session):
    a = _folder(db_session_fixture, "A")
    b = _folder(db_session_fixture, "B", parent_id=a.id)
    c = _folder(db_session_fixture, "C", parent_id=a.id)
    d = _folder(db_session_fixture, "D", parent_id=b.id)
    keep = _folder(db_session_fixture, "Keep")
    for title, folder_id in (("ra", a.id), ("rb", b.id), ("rd", d.id)):
        _report(db_session_fixture, title, folder_id=folder_id)
    root_report = _report(db_session_fixture, "root")
    kept_report = _report(db_session_fixture, "kept", folder_id=keep.id)
    # 删除提交后实例已失效，先取出 ID
    a_id, b_id, c_id, d_id, keep_id = a.id, b.id, c.id, d.id, keep.id
    kept_report_ids = {root_report.id, kept_report.id}

    deletion = folder_service.delete(db_session_fixture, a_id)

    assert sorted(deletion.folder_ids) == sorted([a_id, b_id, c_id, d_id])
    order = deletion.folder_ids
    assert order.index(d_id) < order.index(b_id) < order.index(a_id)
    assert order.index(c_id) < order.index(a_id)
    assert deletion.reports_deleted == 3

    remaining_folders = {item.id for item in folder_service.list_folders(db_session_fixture, parent=ALL)}
    assert remaining_folders == {keep_id}
    remaining_reports = {item.id for item in report_service.list_reports(db_session_fixture, folder=ALL)}
    assert remaining_reports == kept_report_ids


def test_delete_missing_folder_raises_not_found(db_session_fixture: Session):
    with pytest.raises(NotFoundError):
        folder_service.delete(db_session_fixture, 424242)


def test_get_path_is_root_to_leaf_and_idempotent(db_session_fixture: Session):
    a = _folder(db_session_fixture, "A")
    b = _folder(db_session_fixture, "B", parent_id=a.id)
    c = _folder(db_session_fixture, "C", parent_id=b.id)

    first = [item.id for item in folder_service.get_path(db_session_fixture, c.id)]
    second = [item.id for item in folder_service.get_path(db_session_fixture, c.id)]

    assert first == [a.id, b.id, c.id]
    assert first == second
    assert [item.id for item in folder_service.get_path(db_session_fixture, a.id)] == [a.id]


def test_get_path_terminates_on_corrupted_cycle(db_session_fixture: Session):
    a = _folder(db_session_fixture, "A")
    b = _folder(db_session_fixture, "B", parent_id=a.id)
    # 绕过服务层直接写出环：A 的父目录指向 B
    db_session_fixture.execute(update(Folder).where(Folder.id == a.id).values(parent_id=b.id))
    db_session_fixture.commit()
    db_session_fixture.expire_all()

    path = folder_service.get_path(db_session_fixture, b.id)

    assert [item.id for item in path] == [a.id, b.id]


def test_list_folders_filters_by_parent_and_status(db_session_fixture: Session):
    a = _folder(db_session_fixture, "A")
    child = _folder(db_session_fixture, "child", parent_id=a.id)
    z = _folder(db_session_fixture, "Z")
    folder_service.set_status(db_session_fixture, folder_id=z.id, status="archived")

    assert [item.id for item in folder_service.list_folders(db_session_fixture, parent=ROOT)] == [a.id, z.id]
    assert [item.id for item in folder_service.list_folders(db_session_fixture, parent=ROOT, status="active")] == [a.id]
    assert [item.id for item in folder_service.list_folders(db_session_fixture, parent=Specific(a.id))] == [child.id]
    assert {item.id for item in folder_service.list_folders(db_session_fixture, parent=ALL)} == {a.id, child.id, z.id}


def test_delete_rolls_back_whole_subtree_on_failure(db_session_fixture: Session, monkeypatch):
    a = _folder(db_session_fixture, "A")
    b = _folder(db_session_fixture, "B", parent_id=a.id)
    c = _folder(db_session_fixture, "C", parent_id=b.id)
    folder_ids = {a.id, b.id, c.id}
    report_ids = {
        _report(db_session_fixture, "ra", folder_id=a.id).id,
        _report(db_session_fixture, "rc", folder_id=c.id).id,
    }
    a_id = a.id

    original_delete = folder_crud.delete_by_ids
    calls = []

    def failing_delete(db, ids):
        calls.append(list(ids))
        if len(calls) == 2:
            raise OperationalError("DELETE FROM folders", {}, Exception("connection lost"))
        return original_delete(db, ids)

    monkeypatch.setattr(folder_crud, "delete_by_ids", failing_delete)

    with pytest.raises(OperationalError):
        folder_service.delete(db_session_fixture, a_id)

    assert len(calls) == 2
    assert {item.id for item in folder_service.list_folders(db_session_fixture, parent=ALL)} == folder_ids
    assert {item.id for item in report_service.list_reports(db_session_fixture, folder=ALL)} == report_ids


def test_unique_index_violation_is_reported_as_duplicate(db_session_fixture: Session, monkeypatch):
    first = _folder(db_session_fixture, "Race")
    first_id = first.id
    # 模拟并发写入者在校验之后抢先插入：跳过应用层的同级查重，只剩唯一索引兜底
    monkeypatch.setattr(folder_crud, "find_sibling", lambda db, **kwargs: None)

    with pytest.raises(DuplicateNameError) as exc_info:
        _folder(db_session_fixture, "Race")

    assert exc_info.value.status_code == 409
    assert [item.id for item in folder_service.list_folders(db_session_fixture, parent=ROOT)] == [first_id]

    # 已归档的同名文件夹不受索引约束
    folder_service.set_status(db_session_fixture, folder_id=first_id, status="archived")
    assert _folder(db_session_fixture, "Race").status == "active"


def _chain(db: Session, length: int) -> list[int]:
    ids: list[int] = []
    parent_id = None
    for index in range(length):
        parent_id = _folder(db, f"n{index}", parent_id=parent_id).id
        ids.append(parent_id)
    return ids


def test_move_is_rejected_when_target_chain_exceeds_max_depth(db_session_fixture: Session, monkeypatch):
    chain = _chain(db_session_fixture, 6)
    monkeypatch.setattr(get_settings(), "folder_max_depth", 3)

    with pytest.raises(InvalidOperationError):
        folder_service.move(db_session_fixture, folder_id=chain[0], target_parent_id=chain[-1])

    assert folder_service.get(db_session_fixture, chain[0]).parent_id is None
    assert folder_service.get(db_session_fixture, chain[-1]).parent_id == chain[-2]


def test_depth_limit_applies_to_create_and_move(db_session_fixture: Session, monkeypatch):
    monkeypatch.setattr(get_settings(), "folder_max_depth", 3)
    a, b, c = _chain(db_session_fixture, 3)

    with pytest.raises(InvalidOperationError):
        _folder(db_session_fixture, "too-deep", parent_id=c)

    x = _folder(db_session_fixture, "X").id
    y = _folder(db_session_fixture, "Y", parent_id=x).id

    # B 位于第 2 层，X 子树有 2 层，合计超出上限
    with pytest.raises(InvalidOperationError):
        folder_service.move(db_session_fixture, folder_id=x, target_parent_id=b)
    assert folder_service.get(db_session_fixture, x).parent_id is None

    moved = folder_service.move(db_session_fixture, folder_id=y, target_parent_id=b)
    assert moved.parent_id == b
    assert [item.id for item in folder_service.get_path(db_session_fixture, y)] == [a, b, y]


def test_get_path_rejects_chain_longer_than_max_depth(db_session_fixture: Session, monkeypatch):
    chain = _chain(db_session_fixture, 4)
    monkeypatch.setattr(get_settings(), "folder_max_depth", 2)

    with pytest.raises(InvalidOperationError):
        folder_service.get_path(db_session_fixture, chain[-1])

    assert [item.id for item in folder_service.get_path(db_session_fixture, chain[1])] == chain[:2]
