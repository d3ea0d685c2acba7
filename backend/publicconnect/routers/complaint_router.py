"""
投诉路由
---------------------------------
功能：
- GET   /api/complaints        - 投诉列表（普通用户只看自己的，管理员看全部；可按 status 过滤）
- GET   /api/complaints/stats  - 各状态数量统计（管理员）
- GET   /api/complaints/{id}   - 投诉详情（本人或管理员）
- POST  /api/complaints        - 提交投诉（multipart，最多 3 个附件）
- PATCH /api/complaints/{id}   - 更新状态 / 回复（管理员）
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from ..models.complaint_schema import (
    ComplaintCreate,
    ComplaintResponse,
    ComplaintStats,
    ComplaintUpdateRequest,
)
from ..services.access_control import AuthContext, require_admin, require_user
from ..services.storage import DatabaseStorage, get_storage
from ..utils.errors import AppError, ErrorKind, validation_error, validation_message
from ..utils.file_utils import remove_upload, save_upload_file
from ..utils.logger import log

MAX_ATTACHMENTS = 3

router = APIRouter()


@router.get("", response_model=List[ComplaintResponse])
async def list_complaints(
    status: Optional[str] = None,
    ctx: AuthContext = Depends(require_user),
    storage: DatabaseStorage = Depends(get_storage),
):
    owner_id = None if ctx.user.is_admin else ctx.user.id
    try:
        return await storage.get_complaints(owner_id, status)
    except SQLAlchemyError:
        log.exception("获取投诉列表失败")
        raise AppError(ErrorKind.UNEXPECTED, "Failed to fetch complaints")


# 必须在 /{complaint_id} 之前注册
@router.get("/stats", response_model=ComplaintStats)
async def complaint_stats(
    ctx: AuthContext = Depends(require_admin),
    storage: DatabaseStorage = Depends(get_storage),
):
    try:
        return await storage.get_complaint_stats()
    except SQLAlchemyError:
        log.exception("获取投诉统计失败")
        raise AppError(ErrorKind.UNEXPECTED, "Failed to fetch complaint statistics")


@router.get("/{complaint_id}", response_model=ComplaintResponse)
async def get_complaint(
    complaint_id: int,
    ctx: AuthContext = Depends(require_user),
    storage: DatabaseStorage = Depends(get_storage),
):
    try:
        complaint = await storage.get_complaint(complaint_id)
    except SQLAlchemyError:
        log.exception("获取投诉详情失败")
        raise AppError(ErrorKind.UNEXPECTED, "Failed to fetch complaint")

    if complaint is None:
        raise AppError(ErrorKind.NOT_FOUND, "Complaint not found")
    if not ctx.user.is_admin and complaint.user_id != ctx.user.id:
        raise AppError(ErrorKind.AUTHORIZATION, "Not authorized to view this complaint")
    return complaint


@router.post("", response_model=ComplaintResponse, status_code=201)
async def create_complaint(
    request: Request,
    title: str = Form(""),
    description: str = Form(""),
    category: str = Form(""),
    location: str = Form(""),
    attachments: List[UploadFile] = File(default=[]),
    ctx: AuthContext = Depends(require_user),
    storage: DatabaseStorage = Depends(get_storage),
):
    """
    提交投诉

    表单字段：title、description、category、location，attachments 最多 3 个文件（每个最大 5MB）
    """
    files = [f for f in attachments if f.filename]
    if len(files) > MAX_ATTACHMENTS:
        raise AppError(ErrorKind.VALIDATION, f"At most {MAX_ATTACHMENTS} attachments are allowed")

    settings = request.app.state.settings
    urls: List[str] = []
    try:
        for upload in files:
            urls.append(save_upload_file(settings.upload_dir, upload, settings.max_upload_bytes))
        data = ComplaintCreate(
            user_id=ctx.user.id,
            title=title,
            description=description,
            category=category,
            location=location,
            attachments=urls,
        )
        complaint = await storage.create_complaint(data.model_dump())
    except ValidationError as exc:
        for url in urls:
            remove_upload(settings.upload_dir, url)
        raise validation_error(exc, "Invalid complaint data")
    except AppError:
        for url in urls:
            remove_upload(settings.upload_dir, url)
        raise
    except SQLAlchemyError:
        for url in urls:
            remove_upload(settings.upload_dir, url)
        log.exception("创建投诉失败")
        raise AppError(ErrorKind.UNEXPECTED, "Failed to create complaint")

    log.info(f"用户 {ctx.user.id} 提交投诉：{complaint.id}")
    return complaint


@router.patch("/{complaint_id}", response_model=ComplaintResponse)
@validation_message("Invalid update data")
async def update_complaint(
    complaint_id: int,
    req: ComplaintUpdateRequest,
    ctx: AuthContext = Depends(require_admin),
    storage: DatabaseStorage = Depends(get_storage),
):
    try:
        complaint = await storage.update_complaint(complaint_id, req.model_dump(exclude_unset=True))
    except SQLAlchemyError:
        log.exception("更新投诉失败")
        raise AppError(ErrorKind.UNEXPECTED, "Failed to update complaint")

    if complaint is None:
        raise AppError(ErrorKind.NOT_FOUND, "Complaint not found")

    log.info(f"管理员 {ctx.user.id} 更新投诉：{complaint.id} -> {complaint.status}")
    return complaint
