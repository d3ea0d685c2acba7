"""
投诉相关的 Pydantic Schema
---------------------------------
功能：
- ComplaintCreate：投诉表单校验（附件保存后填入 attachments）
- ComplaintUpdateRequest：管理员更新状态 / 回复（status 可省略但不能为 null）
- ComplaintStats：各状态数量统计
"""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import Field, field_validator

from .content_schema import reject_null
from .response_schema import CamelModel

ComplaintStatus = Literal["pending", "in-progress", "completed"]


class ComplaintCreate(CamelModel):
    user_id: int
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1)
    attachments: List[str] = Field(default_factory=list)


class ComplaintUpdateRequest(CamelModel):
    status: Optional[ComplaintStatus] = None
    admin_response: Optional[str] = None

    check_not_null = field_validator("status", mode="before")(reject_null)


class ComplaintResponse(CamelModel):
    id: int
    user_id: int
    title: str
    description: str
    category: str
    location: str
    status: str
    attachments: List[str]
    admin_response: Optional[str]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]


class ComplaintStats(CamelModel):
    pending: int
    in_progress: int
    completed: int
