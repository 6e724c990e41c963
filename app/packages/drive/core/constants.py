"""常量定义：集中维护状态码、默认账号与业务限制，避免魔法值散落各处。"""

from fastapi import status

HTTP_STATUS_OK = status.HTTP_200_OK
HTTP_STATUS_CREATED = status.HTTP_201_CREATED
HTTP_STATUS_BAD_REQUEST = status.HTTP_400_BAD_REQUEST
HTTP_STATUS_UNAUTHORIZED = status.HTTP_401_UNAUTHORIZED
HTTP_STATUS_FORBIDDEN = status.HTTP_403_FORBIDDEN
HTTP_STATUS_NOT_FOUND = status.HTTP_404_NOT_FOUND
HTTP_STATUS_CONFLICT = status.HTTP_409_CONFLICT

ACCESS_TOKEN_TYPE = "bearer"

ADMIN_ROLE = "admin"
ASSISTANT_ROLE = "assistant"

DEFAULT_ADMIN_USERNAME = "admin"
DEFAULT_ADMIN_PASSWORD = "admin123"
DEFAULT_ADMIN_FULL_NAME = "System Admin"

DEFAULT_ASSISTANT_USERNAME = "assistant"
DEFAULT_ASSISTANT_PASSWORD = "assist123"
DEFAULT_ASSISTANT_FULL_NAME = "Assistant User"

# 查询参数中的目录哨兵值
FOLDER_FILTER_ROOT_TOKENS = frozenset({"null", "root"})
FOLDER_FILTER_ALL_TOKEN = "all"

# 主键列为 32 位有符号整数
MAX_ROW_ID = 2**31 - 1
