"""审计日志的响应模型。"""

from typing import Optional

from pydantic import BaseModel

from app.packages.drive.api.v1.schemas.common import ResponseEnvelope


class ActivityLogItem(BaseModel):
    id: int
    userId: Optional[int] = None
    action: str
    description: Optional[str] = None
    timestamp: Optional[str] = None
    userFullName: Optional[str] = None


class ActivityLogListData(BaseModel):
    total: int
    items: list[ActivityLogItem]
    page: int
    page_size: int


ActivityLogListResponse = ResponseEnvelope[ActivityLogListData]
