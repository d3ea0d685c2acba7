"""
管理员路由
---------------------------------
功能：
- POST /api/admin/promote/{user_id} - 将指定用户提升为管理员
"""

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError

from ..models.auth_schema import UserResponse
from ..services.access_control import AuthContext, require_admin
from ..services.storage import DatabaseStorage, get_storage
from ..utils.errors import AppError, ErrorKind
from ..utils.logger import log

router = APIRouter()


@router.post("/promote/{user_id}", response_model=UserResponse)
async def promote_user(
    user_id: int,
    ctx: AuthContext = Depends(require_admin),
    storage: DatabaseStorage = Depends(get_storage),
):
    try:
        user = await storage.set_user_as_admin(user_id)
    except SQLAlchemyError:
        log.exception("提升管理员失败")
        raise AppError(ErrorKind.UNEXPECTED, "Failed to promote user to admin")

    if user is None:
        raise AppError(ErrorKind.NOT_FOUND, "User not found")

    log.info(f"管理员 {ctx.user.id} 将用户 {user.id} 提升为管理员")
    return user
