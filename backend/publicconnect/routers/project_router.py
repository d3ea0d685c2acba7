"""
工程项目路由
---------------------------------
功能：
- GET    /api/projects        - 项目列表（可按 status 过滤）
- GET    /api/projects/{id}   - 项目详情
- POST   /api/projects        - 创建项目（管理员）
- PUT    /api/projects/{id}   - 部分更新项目（管理员）
- DELETE /api/projects/{id}   - 删除项目（管理员）
"""

from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError

from ..models.content_schema import ProjectCreateRequest, ProjectResponse, ProjectUpdateRequest
from ..models.response_schema import SuccessResponse
from ..services.access_control import AuthContext, require_admin
from ..services.storage import DatabaseStorage, get_storage
from ..utils.errors import AppError, ErrorKind, validation_message
from ..utils.logger import log

router = APIRouter()


@router.get("", response_model=List[ProjectResponse])
async def list_projects(
    status: Optional[str] = None,
    storage: DatabaseStorage = Depends(get_storage),
):
    try:
        return await storage.get_projects(status)
    except SQLAlchemyError:
        log.exception("获取项目列表失败")
        raise AppError(ErrorKind.UNEXPECTED, "Failed to fetch projects")


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(project_id: int, storage: DatabaseStorage = Depends(get_storage)):
    try:
        project = await storage.get_project(project_id)
    except SQLAlchemyError:
        log.exception("获取项目详情失败")
        raise AppError(ErrorKind.UNEXPECTED, "Failed to fetch project")

    if project is None:
        raise AppError(ErrorKind.NOT_FOUND, "Project not found")
    return project


@router.post("", response_model=ProjectResponse, status_code=201)
@validation_message("Invalid project data")
async def create_project(
    req: ProjectCreateRequest,
    ctx: AuthContext = Depends(require_admin),
    storage: DatabaseStorage = Depends(get_storage),
):
    try:
        project = await storage.create_project(req.model_dump())
    except SQLAlchemyError:
        log.exception("创建项目失败")
        raise AppError(ErrorKind.UNEXPECTED, "Failed to create project")

    log.info(f"管理员 {ctx.user.id} 创建项目：{project.id} - {project.title}")
    return project


@router.put("/{project_id}", response_model=ProjectResponse)
@validation_message("Invalid project data")
async def update_project(
    project_id: int,
    req: ProjectUpdateRequest,
    ctx: AuthContext = Depends(require_admin),
    storage: DatabaseStorage = Depends(get_storage),
):
    try:
        project = await storage.update_project(project_id, req.model_dump(exclude_unset=True))
    except SQLAlchemyError:
        log.exception("更新项目失败")
        raise AppError(ErrorKind.UNEXPECTED, "Failed to update project")

    if project is None:
        raise AppError(ErrorKind.NOT_FOUND, "Project not found")
    return project


@router.delete("/{project_id}", response_model=SuccessResponse)
async def delete_project(
    project_id: int,
    ctx: AuthContext = Depends(require_admin),
    storage: DatabaseStorage = Depends(get_storage),
):
    try:
        success = await storage.delete_project(project_id)
    except SQLAlchemyError:
        log.exception("删除项目失败")
        raise AppError(ErrorKind.UNEXPECTED, "Failed to delete project")

    log.info(f"管理员 {ctx.user.id} 删除项目：{project_id}")
    return {"success": success}
