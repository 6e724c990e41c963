"""Folder filter: the parsed form of the ``parentId`` / ``folderId`` query parameters.

The raw query string overloads one parameter with sentinels ("null", "root",
"all") and numeric ids. It is parsed once at the HTTP edge into one of three
variants, and the core only ever sees the variant:

- ``Root``: rows whose folder reference IS NULL (exact match, not "everything");
- ``All``: no folder restriction;
- ``Specific(id)``: rows whose folder reference equals ``id``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from sqlalchemy.orm import Query

from app.packages.drive.core.constants import FOLDER_FILTER_ALL_TOKEN, FOLDER_FILTER_ROOT_TOKENS, MAX_ROW_ID
from app.packages.drive.core.exceptions import InvalidOperationError


@dataclass(frozen=True)
class Root:
    pass


@dataclass(frozen=True)
class All:
    pass


@dataclass(frozen=True)
class Specific:
    id: int


FolderFilter = Union[Root, All, Specific]

ROOT = Root()
ALL = All()


def parse_folder_filter(raw: Optional[str], *, default: FolderFilter) -> FolderFilter:
    """Parse a raw query value; an absent or blank value yields ``default``."""
    if raw is None:
        return default
    token = raw.strip().lower()
    if not token:
        return default
    if token in FOLDER_FILTER_ROOT_TOKENS:
        return ROOT
    if token == FOLDER_FILTER_ALL_TOKEN:
        return ALL
    # 只接受 ASCII 数字："²" 之类的 Unicode 数字能通过 isdigit 却不能被 int 解析
    if token.isascii() and token.isdigit():
        folder_id = int(token)
        if 0 < folder_id <= MAX_ROW_ID:
            return Specific(folder_id)
    raise InvalidOperationError(f"无法识别的目录参数：{raw}")


def apply_folder_filter(query: Query, column, folder_filter: FolderFilter) -> Query:
    if isinstance(folder_filter, Root):
        return query.filter(column.is_(None))
    if isinstance(folder_filter, Specific):
        return query.filter(column == folder_filter.id)
    return query
