"""
公共内容数据模型
---------------------------------
功能：
- Project：市政工程项目（进行中 / 已完成）
- MediaItem：媒体资源（视频 / 图片 / 文档）
- Event：社区活动

使用：
- 管理员维护，所有人可读
"""

from sqlalchemy import Column, DateTime, Integer, String, Text

from .base import Base, utcnow


class Project(Base):
    """工程项目"""
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, index=True, comment="项目ID")
    title = Column(Text, nullable=False, comment="标题")
    description = Column(Text, nullable=False, comment="描述")
    status = Column(String(32), nullable=False, index=True, comment="状态：in-progress / completed")
    category = Column(Text, nullable=False, comment="分类")
    image_url = Column(Text, nullable=True, comment="封面图URL")
    start_date = Column(DateTime, nullable=False, comment="开始日期")
    end_date = Column(DateTime, nullable=True, comment="结束日期")
    created_at = Column(DateTime, default=utcnow, comment="创建时间")
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, comment="更新时间")

    def __repr__(self):
        return f"<Project(id={self.id}, title={self.title}, status={self.status})>"


class MediaItem(Base):
    """媒体资源"""
    __tablename__ = "media_items"

    id = Column(Integer, primary_key=True, index=True, comment="媒体ID")
    title = Column(Text, nullable=False, comment="标题")
    type = Column(String(16), nullable=False, index=True, comment="类型：video / image / document")
    url = Column(Text, nullable=False, comment="访问地址")
    description = Column(Text, nullable=True, comment="描述")
    created_at = Column(DateTime, default=utcnow, comment="创建时间")

    def __repr__(self):
        return f"<MediaItem(id={self.id}, type={self.type}, url={self.url})>"


class Event(Base):
    """社区活动"""
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True, comment="活动ID")
    title = Column(Text, nullable=False, comment="标题")
    description = Column(Text, nullable=False, comment="描述")
    location = Column(Text, nullable=False, comment="地点")
    date = Column(DateTime, nullable=False, index=True, comment="活动时间")
    image_url = Column(Text, nullable=True, comment="封面图URL")
    created_at = Column(DateTime, default=utcnow, comment="创建时间")

    def __repr__(self):
        return f"<Event(id={self.id}, title={self.title}, date={self.date})>"
