"""
用户数据模型
---------------------------------
功能：
- 定义 User 表结构，用于存储用户注册信息
- 字段包括：id、姓名、邮箱、手机号、密码哈希、管理员标记、创建/更新时间

使用：
- 用于用户注册、登录验证、管理员鉴权
- 邮箱与手机号均全局唯一；password 字段只保存哈希，从不保存明文
"""

from sqlalchemy import Boolean, Column, DateTime, Integer, String

from .base import Base, utcnow


class User(Base):
    """用户模型"""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True, comment="用户ID")
    full_name = Column(String(255), nullable=False, comment="姓名")
    email = Column(String(255), unique=True, index=True, nullable=False, comment="邮箱")
    phone = Column(String(10), unique=True, index=True, nullable=False, comment="手机号")
    password = Column(String(255), nullable=False, comment="密码哈希")
    is_admin = Column(Boolean, default=False, nullable=False, comment="是否管理员")
    created_at = Column(DateTime, default=utcnow, comment="创建时间")
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, comment="更新时间")

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email}, is_admin={self.is_admin})>"
