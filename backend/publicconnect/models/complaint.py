"""
投诉数据模型
---------------------------------
功能：
- 定义 Complaint 表结构，记录市民提交的投诉及管理员回复
- attachments 以 JSON 数组保存上传文件的访问地址
"""

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String, Text

from .base import Base, utcnow


class Complaint(Base):
    """投诉模型"""
    __tablename__ = "complaints"

    id = Column(Integer, primary_key=True, index=True, comment="投诉ID")
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True, comment="提交者ID")
    title = Column(Text, nullable=False, comment="标题")
    description = Column(Text, nullable=False, comment="描述")
    category = Column(Text, nullable=False, comment="分类")
    location = Column(Text, nullable=False, comment="地点")
    status = Column(String(32), nullable=False, default="pending", index=True, comment="状态：pending / in-progress / completed")
    attachments = Column(JSON, nullable=False, default=list, comment="附件URL列表")
    admin_response = Column(Text, nullable=True, comment="管理员回复")
    created_at = Column(DateTime, default=utcnow, comment="创建时间")
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, comment="更新时间")

    def __repr__(self):
        return f"<Complaint(id={self.id}, user_id={self.user_id}, status={self.status})>"
