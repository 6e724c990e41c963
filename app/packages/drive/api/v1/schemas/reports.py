"""文件（报表）接口的请求/响应模型。"""

from typing import Any, Optional

from pydantic import BaseModel, Field

from app.packages.drive.api.v1.schemas.common import ResponseEnvelope
from app.packages.drive.api.v1.schemas.folders import NodeStatus

# camelCase 请求字段到模型列名的映射
REPORT_FIELD_MAP = {
    "title": "title",
    "description": "description",
    "fileName": "file_name",
    "fileType": "file_type",
    "fileSize": "file_size",
    "fileData": "file_data",
    "folderId": "folder_id",
    "status": "status",
    "activityId": "activity_id",
    "reportYear": "report_year",
    "reportMonth": "report_month",
}


class ReportInfo(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    fileName: str
    fileType: str
    fileSize: int
    folderId: Optional[int] = None
    status: str
    uploadedBy: Optional[int] = None
    activityId: Optional[int] = None
    reportYear: Optional[int] = None
    reportMonth: Optional[int] = None
    createdAt: Optional[str] = None


class ReportCreateBody(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    fileName: str = Field(..., min_length=1, max_length=255)
    fileType: str = Field(..., min_length=1, max_length=255)
    fileSize: int = Field(0, ge=0)
    fileData: Optional[str] = None  # base64 编码的文件内容
    folderId: Optional[int] = None
    activityId: Optional[int] = None
    reportYear: Optional[int] = Field(None, ge=1900, le=9999)
    reportMonth: Optional[int] = Field(None, ge=1, le=12)


class ReportUpdateBody(BaseModel):
    """局部更新：只有显式传入的字段会被修改（folderId 传 null 表示移到根目录）。"""

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    fileName: Optional[str] = Field(None, min_length=1, max_length=255)
    folderId: Optional[int] = None
    status: Optional[NodeStatus] = None
    reportYear: Optional[int] = Field(None, ge=1900, le=9999)
    reportMonth: Optional[int] = Field(None, ge=1, le=12)


class ReportMoveBody(BaseModel):
    reportIds: list[int] = Field(default_factory=list)
    targetFolderId: Optional[int] = None


class ReportMoveData(BaseModel):
    moved: int


def to_model_fields(payload: dict[str, Any]) -> dict[str, Any]:
    return {REPORT_FIELD_MAP[key]: value for key, value in payload.items()}


ReportResponse = ResponseEnvelope[ReportInfo]
ReportListResponse = ResponseEnvelope[list[ReportInfo]]
ReportMoveResponse = ResponseEnvelope[ReportMoveData]
ReportDeletionResponse = ResponseEnvelope[None]
