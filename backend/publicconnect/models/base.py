"""
数据库模型基类
---------------------------------
功能：
- 提供统一的 Base 供所有模型继承
- 确保所有模型在同一个 metadata 中
- 提供 utcnow() 作为时间戳字段的默认值

使用：
from .base import Base, utcnow

class MyModel(Base):
    __tablename__ = "my_table"
    ...
"""

from datetime import datetime, timezone

from sqlalchemy.orm import declarative_base

# 创建统一的 Base
Base = declarative_base()


def utcnow() -> datetime:
    """当前 UTC 时间（naive，便于 SQLite 存储与比较）"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    """带时区的时间统一转为 naive UTC；naive 时间视为 UTC 原样返回"""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
