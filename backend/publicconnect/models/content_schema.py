"""
工程项目 / 媒体 / 活动 的 Pydantic Schema
---------------------------------
功能：
- 定义请求和响应的数据模型，对外使用 camelCase
- ProjectUpdateRequest 全部字段可选，用于部分更新；非空列不接受显式 null
"""

from datetime import datetime
from typing import Annotated, Literal, Optional

from pydantic import AfterValidator, Field, field_validator
from pydantic_core import PydanticCustomError

from .base import to_naive_utc
from .response_schema import CamelModel

ProjectStatus = Literal["in-progress", "completed"]
MediaType = Literal["video", "image", "document"]
# 入库前统一转为 naive UTC
UtcDatetime = Annotated[datetime, AfterValidator(to_naive_utc)]


def reject_null(value):
    """部分更新时字段可以省略，但不能显式置为 null"""
    if value is None:
        raise PydanticCustomError("null_not_allowed", "Field cannot be null")
    return value


class ProjectCreateRequest(CamelModel):
    """创建项目请求"""
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    status: ProjectStatus
    category: str = Field(..., min_length=1)
    image_url: Optional[str] = None
    start_date: UtcDatetime
    end_date: Optional[UtcDatetime] = None


class ProjectUpdateRequest(CamelModel):
    """更新项目请求"""
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = Field(None, min_length=1)
    status: Optional[ProjectStatus] = None
    category: Optional[str] = Field(None, min_length=1)
    image_url: Optional[str] = None
    start_date: Optional[UtcDatetime] = None
    end_date: Optional[UtcDatetime] = None

    check_not_null = field_validator(
        "title", "description", "status", "category", "start_date", mode="before"
    )(reject_null)


class ProjectResponse(CamelModel):
    id: int
    title: str
    description: str
    status: str
    category: str
    image_url: Optional[str]
    start_date: datetime
    end_date: Optional[datetime]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]


class MediaItemCreate(CamelModel):
    """媒体表单校验（文件保存后再构造）"""
    title: str = Field(..., min_length=1)
    type: MediaType
    url: str
    description: Optional[str] = None


class MediaItemResponse(CamelModel):
    id: int
    title: str
    type: str
    url: str
    description: Optional[str]
    created_at: Optional[datetime]


class EventCreateRequest(CamelModel):
    """创建活动请求"""
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1)
    date: UtcDatetime
    image_url: Optional[str] = None


class EventResponse(CamelModel):
    id: int
    title: str
    description: str
    location: str
    date: datetime
    image_url: Optional[str]
    created_at: Optional[datetime]
