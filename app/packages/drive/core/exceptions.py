"""异常处理模块：定义统一的业务异常、目录树领域错误与全局响应格式。"""

from typing import Any, Optional

from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse

from app.packages.drive.core.constants import (
    HTTP_STATUS_BAD_REQUEST,
    HTTP_STATUS_CONFLICT,
    HTTP_STATUS_NOT_FOUND,
)
from app.packages.drive.core.security import consume_refreshed_token


class AppException(HTTPException):
    """携带统一响应结构的业务异常，方便在全局处理中转换响应体。"""

    def __init__(self, msg: str, code: int = status.HTTP_400_BAD_REQUEST, data: Any = None) -> None:
        super().__init__(status_code=code, detail=msg)
        self.data = data

    @property
    def msg(self) -> str:
        return str(self.detail)


class DriveError(AppException):
    """文件夹/文件操作的可恢复错误基类，消息可直接展示给用户。"""

    default_code = HTTP_STATUS_BAD_REQUEST

    def __init__(self, msg: str, code: Optional[int] = None, data: Any = None) -> None:
        super().__init__(msg, code if code is not None else self.default_code, data)


class DuplicateNameError(DriveError):
    """同一父目录下已存在同名（且同状态）的文件夹。"""

    default_code = HTTP_STATUS_CONFLICT

    @classmethod
    def for_folder(cls, name: str) -> "DuplicateNameError":
        return cls(f"当前位置已存在名为“{name}”的文件夹")


class CycleError(DriveError):
    """移动会让文件夹成为自身的祖先。"""


class InvalidOperationError(DriveError):
    """结构上无意义的请求，例如把文件夹移动到自身下。"""


class NotFoundError(DriveError):
    default_code = HTTP_STATUS_NOT_FOUND


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:  # pragma: no cover - framework glue
    """将 FastAPI 的 ``HTTPException`` 转换为统一响应格式。"""
    payload = {"msg": exc.detail, "data": getattr(exc, "data", None), "code": exc.status_code}
    token = consume_refreshed_token()
    if token:
        payload["meta"] = {"access_token": token}
    return JSONResponse(status_code=exc.status_code, content=payload)


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:  # pragma: no cover - framework glue
    """兜底处理：将未捕获异常转换为标准的 500 响应结构，不泄露内部错误文本。"""
    payload = {
        "msg": "服务器内部错误",
        "data": None,
        "code": status.HTTP_500_INTERNAL_SERVER_ERROR,
    }
    token = consume_refreshed_token()
    if token:
        payload["meta"] = {"access_token": token}
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=payload)
