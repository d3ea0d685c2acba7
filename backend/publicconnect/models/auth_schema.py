"""
认证相关的 Pydantic Schema
---------------------------------
功能：
- RegisterRequest：注册请求体（姓名、邮箱、10 位手机号、至少 8 位密码、确认密码）
- LoginRequest：登录请求体
- UserResponse：对外的用户信息（不包含密码哈希）

校验失败时 FastAPI 会一次性列出所有字段错误，由全局异常处理器转为 400。
"""

import re
from datetime import datetime
from typing import Optional

from pydantic import Field, ValidationInfo, field_validator
from pydantic_core import PydanticCustomError

from .response_schema import CamelModel

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
PHONE_PATTERN = re.compile(r"^\d{10}$")
PASSWORD_MIN_LENGTH = 8


def _check_email(value: str) -> str:
    if not EMAIL_PATTERN.match(value):
        raise PydanticCustomError("email", "Please enter a valid email address")
    return value


class RegisterRequest(CamelModel):
    """注册请求"""
    full_name: str = Field(..., min_length=1, max_length=255, description="姓名")
    email: str = Field(..., max_length=255, description="邮箱")
    phone: str = Field(..., description="手机号（10 位数字）")
    password: str = Field(..., description="密码")
    confirm_password: str = Field(..., description="确认密码")

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        return _check_email(value)

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, value: str) -> str:
        if not PHONE_PATTERN.match(value):
            raise PydanticCustomError("phone", "Phone number must be 10 digits")
        return value

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str) -> str:
        if len(value) < PASSWORD_MIN_LENGTH:
            raise PydanticCustomError(
                "password_too_short",
                "Password must be at least {min_length} characters",
                {"min_length": PASSWORD_MIN_LENGTH},
            )
        return value

    @field_validator("confirm_password")
    @classmethod
    def validate_confirm_password(cls, value: str, info: ValidationInfo) -> str:
        # password 本身不合法时不在 info.data 中，此时只报告 password 的错误
        password = info.data.get("password")
        if password is not None and value != password:
            raise PydanticCustomError("password_mismatch", "Passwords don't match")
        return value


class LoginRequest(CamelModel):
    """登录请求"""
    email: str
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        return _check_email(value)


class UserResponse(CamelModel):
    """用户信息响应（不含密码哈希）"""
    id: int
    full_name: str
    email: str
    phone: str
    is_admin: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class AuthResponse(CamelModel):
    user: UserResponse


class AdminCheckResponse(CamelModel):
    is_admin: bool
