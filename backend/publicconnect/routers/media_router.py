"""
媒体资源路由
---------------------------------
功能：
- GET    /api/media?type=  - 媒体列表（可按 video / image / document 过滤）
- POST   /api/media        - 上传媒体（管理员，multipart：file、title、type、description）
- DELETE /api/media/{id}   - 删除媒体记录（管理员）
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from ..models.content_schema import MediaItemCreate, MediaItemResponse
from ..models.response_schema import SuccessResponse
from ..services.access_control import AuthContext, require_admin
from ..services.storage import DatabaseStorage, get_storage
from ..utils.errors import AppError, ErrorKind, validation_error
from ..utils.file_utils import remove_upload, save_upload_file
from ..utils.logger import log

router = APIRouter()


@router.get("", response_model=List[MediaItemResponse])
async def list_media(type: Optional[str] = None, storage: DatabaseStorage = Depends(get_storage)):
    try:
        return await storage.get_media_items(type)
    except SQLAlchemyError:
        log.exception("获取媒体列表失败")
        raise AppError(ErrorKind.UNEXPECTED, "Failed to fetch media items")


@router.post("", response_model=MediaItemResponse, status_code=201)
async def create_media(
    request: Request,
    file: Optional[UploadFile] = File(None),
    title: str = Form(""),
    type: str = Form(""),
    description: Optional[str] = Form(None),
    ctx: AuthContext = Depends(require_admin),
    storage: DatabaseStorage = Depends(get_storage),
):
    """
    上传媒体文件

    表单字段：
    - file: 文件（必填，最大 5MB）
    - title: 标题
    - type: video / image / document
    - description: 描述（可选）
    """
    if file is None or not file.filename:
        raise AppError(ErrorKind.VALIDATION, "No file uploaded")

    settings = request.app.state.settings
    url = save_upload_file(settings.upload_dir, file, settings.max_upload_bytes)

    try:
        data = MediaItemCreate(title=title, type=type, url=url, description=description or None)
    except ValidationError as exc:
        remove_upload(settings.upload_dir, url)
        raise validation_error(exc, "Invalid media item data")

    try:
        item = await storage.create_media_item(data.model_dump())
    except SQLAlchemyError:
        remove_upload(settings.upload_dir, url)
        log.exception("创建媒体记录失败")
        raise AppError(ErrorKind.UNEXPECTED, "Failed to create media item")

    log.info(f"管理员 {ctx.user.id} 上传媒体：{item.id} - {item.url}")
    return item


@router.delete("/{media_id}", response_model=SuccessResponse)
async def delete_media(
    media_id: int,
    ctx: AuthContext = Depends(require_admin),
    storage: DatabaseStorage = Depends(get_storage),
):
    try:
        success = await storage.delete_media_item(media_id)
    except SQLAlchemyError:
        log.exception("删除媒体失败")
        raise AppError(ErrorKind.UNEXPECTED, "Failed to delete media item")
    return {"success": success}
