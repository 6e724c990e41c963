"""批量操作的请求/响应模型。"""

from typing import Any, Optional

from pydantic import BaseModel, Field

from app.packages.drive.api.v1.schemas.common import ResponseEnvelope


class BulkBody(BaseModel):
    folderIds: list[int] = Field(default_factory=list)
    reportIds: list[int] = Field(default_factory=list)


class BulkMoveBody(BulkBody):
    targetParentId: Optional[int] = None  # 为空表示移到根目录


# 计数字段名随动作变化（restoredFolders / archivedFiles ...），因此用 dict 承载
BulkResponse = ResponseEnvelope[dict[str, Any]]
