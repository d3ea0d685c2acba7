"""
统一返回模型
---------------------------------
功能：
- CamelModel：所有接口 Schema 的基类，对外字段使用 camelCase，对内保持 snake_case，
  并允许直接从 ORM 对象构造（from_attributes）。
- MessageResponse / SuccessResponse / ErrorResponse：通用的消息、删除结果与错误返回结构。
"""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(BaseModel):
    message: str


class SuccessResponse(BaseModel):
    success: bool


class FieldError(BaseModel):
    path: List[Any]
    message: str


class ErrorResponse(BaseModel):
    message: str
    errors: Optional[List[FieldError]] = None
