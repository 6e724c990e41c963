"""文件夹接口的请求/响应模型。"""

from typing import Literal, Optional

from pydantic import BaseModel, Field

from app.packages.drive.api.v1.schemas.common import ResponseEnvelope

NodeStatus = Literal["active", "archived"]


class FolderInfo(BaseModel):
    id: int
    name: str
    parentId: Optional[int] = None
    status: str
    createdBy: Optional[int] = None
    createdAt: Optional[str] = None


class FolderCreateBody(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    parentId: Optional[int] = None  # 为空表示创建在根目录


class FolderRenameBody(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)


class FolderMoveBody(BaseModel):
    targetParentId: Optional[int] = None


class StatusBody(BaseModel):
    status: NodeStatus


class FolderDeletionData(BaseModel):
    deletedFolderIds: list[int]
    deletedReports: int


FolderResponse = ResponseEnvelope[FolderInfo]
FolderListResponse = ResponseEnvelope[list[FolderInfo]]
FolderDeletionResponse = ResponseEnvelope[FolderDeletionData]
