"""
存储服务
---------------------------------
功能：
- DatabaseStorage：对单个 AsyncSession 的统一封装，路由只通过它读写数据库
- 用户：按ID/邮箱查询、创建、提升为管理员
- 项目、媒体、投诉、活动：增删改查与统计

约定：
- 写操作在方法内提交；失败时回滚后继续抛出，由路由层映射为 500
- 唯一性（邮箱、手机号）由数据库约束保证
"""

from typing import Any, Dict, List, Optional

from fastapi import Depends
from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..config.database import get_db
from ..models.base import utcnow
from ..models.complaint import Complaint
from ..models.content import Event, MediaItem, Project
from ..models.user import User


class DatabaseStorage:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def _save(self, obj):
        self.db.add(obj)
        try:
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise
        await self.db.refresh(obj)
        return obj

    async def _delete(self, model, obj_id: int) -> bool:
        try:
            result = await self.db.execute(delete(model).where(model.id == obj_id))
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise
        return result.rowcount > 0

    # ------------------------------------------------------------------
    # 用户
    # ------------------------------------------------------------------

    async def get_user_by_id(self, user_id: int) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_user_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def create_user(
        self,
        full_name: str,
        email: str,
        phone: str,
        password_hash: str,
        is_admin: bool = False,
    ) -> User:
        user = User(
            full_name=full_name,
            email=email,
            phone=phone,
            password=password_hash,
            is_admin=is_admin,
        )
        return await self._save(user)

    async def set_user_as_admin(self, user_id: int) -> Optional[User]:
        user = await self.get_user_by_id(user_id)
        if user is None:
            return None
        user.is_admin = True
        user.updated_at = utcnow()
        return await self._save(user)

    # ------------------------------------------------------------------
    # 项目
    # ------------------------------------------------------------------

    async def get_projects(self, status: Optional[str] = None) -> List[Project]:
        stmt = select(Project)
        if status:
            stmt = stmt.where(Project.status == status)
        result = await self.db.execute(stmt.order_by(Project.created_at.desc(), Project.id.desc()))
        return list(result.scalars().all())

    async def get_project(self, project_id: int) -> Optional[Project]:
        result = await self.db.execute(select(Project).where(Project.id == project_id))
        return result.scalar_one_or_none()

    async def create_project(self, data: Dict[str, Any]) -> Project:
        return await self._save(Project(**data))

    async def update_project(self, project_id: int, data: Dict[str, Any]) -> Optional[Project]:
        project = await self.get_project(project_id)
        if project is None:
            return None
        for key, value in data.items():
            setattr(project, key, value)
        project.updated_at = utcnow()
        return await self._save(project)

    async def delete_project(self, project_id: int) -> bool:
        return await self._delete(Project, project_id)

    # ------------------------------------------------------------------
    # 媒体
    # ------------------------------------------------------------------

    async def get_media_items(self, media_type: Optional[str] = None) -> List[MediaItem]:
        stmt = select(MediaItem)
        if media_type:
            stmt = stmt.where(MediaItem.type == media_type)
        result = await self.db.execute(stmt.order_by(MediaItem.created_at.desc(), MediaItem.id.desc()))
        return list(result.scalars().all())

    async def create_media_item(self, data: Dict[str, Any]) -> MediaItem:
        return await self._save(MediaItem(**data))

    async def delete_media_item(self, media_id: int) -> bool:
        return await self._delete(MediaItem, media_id)

    # ------------------------------------------------------------------
    # 投诉
    # ------------------------------------------------------------------

    async def get_complaints(
        self,
        user_id: Optional[int] = None,
        status: Optional[str] = None,
    ) -> List[Complaint]:
        stmt = select(Complaint)
        if user_id is not None:
            stmt = stmt.where(Complaint.user_id == user_id)
        if status:
            stmt = stmt.where(Complaint.status == status)
        result = await self.db.execute(stmt.order_by(Complaint.created_at.desc(), Complaint.id.desc()))
        return list(result.scalars().all())

    async def get_complaint(self, complaint_id: int) -> Optional[Complaint]:
        result = await self.db.execute(select(Complaint).where(Complaint.id == complaint_id))
        return result.scalar_one_or_none()

    async def create_complaint(self, data: Dict[str, Any]) -> Complaint:
        return await self._save(Complaint(**data))

    async def update_complaint(self, complaint_id: int, data: Dict[str, Any]) -> Optional[Complaint]:
        complaint = await self.get_complaint(complaint_id)
        if complaint is None:
            return None
        for key, value in data.items():
            setattr(complaint, key, value)
        complaint.updated_at = utcnow()
        return await self._save(complaint)

    async def get_complaint_stats(self) -> Dict[str, int]:
        result = await self.db.execute(
            select(Complaint.status, func.count(Complaint.id)).group_by(Complaint.status)
        )
        counts = {status: count for status, count in result.all()}
        return {
            "pending": counts.get("pending", 0),
            "in_progress": counts.get("in-progress", 0),
            "completed": counts.get("completed", 0),
        }

    # ------------------------------------------------------------------
    # 活动
    # ------------------------------------------------------------------

    async def get_events(self, upcoming: bool = False) -> List[Event]:
        stmt = select(Event)
        if upcoming:
            stmt = stmt.where(Event.date > utcnow())
        result = await self.db.execute(stmt.order_by(Event.date.asc()))
        return list(result.scalars().all())

    async def create_event(self, data: Dict[str, Any]) -> Event:
        return await self._save(Event(**data))

    async def delete_event(self, event_id: int) -> bool:
        return await self._delete(Event, event_id)


async def get_storage(db: AsyncSession = Depends(get_db)) -> DatabaseStorage:
    """依赖注入：获取当前请求的存储对象"""
    return DatabaseStorage(db)
