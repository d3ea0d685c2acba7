"""
社区活动路由
---------------------------------
功能：
- GET    /api/events?upcoming=true - 活动列表（按时间升序，可只看未开始的）
- POST   /api/events               - 创建活动（管理员）
- DELETE /api/events/{id}          - 删除活动（管理员）
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError

from ..models.content_schema import EventCreateRequest, EventResponse
from ..models.response_schema import SuccessResponse
from ..services.access_control import AuthContext, require_admin
from ..services.storage import DatabaseStorage, get_storage
from ..utils.errors import AppError, ErrorKind, validation_message
from ..utils.logger import log

router = APIRouter()


@router.get("", response_model=List[EventResponse])
async def list_events(upcoming: bool = False, storage: DatabaseStorage = Depends(get_storage)):
    try:
        return await storage.get_events(upcoming)
    except SQLAlchemyError:
        log.exception("获取活动列表失败")
        raise AppError(ErrorKind.UNEXPECTED, "Failed to fetch events")


@router.post("", response_model=EventResponse, status_code=201)
@validation_message("Invalid event data")
async def create_event(
    req: EventCreateRequest,
    ctx: AuthContext = Depends(require_admin),
    storage: DatabaseStorage = Depends(get_storage),
):
    try:
        event = await storage.create_event(req.model_dump())
    except SQLAlchemyError:
        log.exception("创建活动失败")
        raise AppError(ErrorKind.UNEXPECTED, "Failed to create event")

    log.info(f"管理员 {ctx.user.id} 创建活动：{event.id} - {event.title}")
    return event


@router.delete("/{event_id}", response_model=SuccessResponse)
async def delete_event(
    event_id: int,
    ctx: AuthContext = Depends(require_admin),
    storage: DatabaseStorage = Depends(get_storage),
):
    try:
        success = await storage.delete_event(event_id)
    except SQLAlchemyError:
        log.exception("删除活动失败")
        raise AppError(ErrorKind.UNEXPECTED, "Failed to delete event")
    return {"success": success}
