"""
访问控制
---------------------------------
功能：
- require_user：认证关卡。读取名为 `token` 的 Cookie，校验签名与过期时间，
  按 Token 中的用户ID查库，返回请求级上下文 AuthContext。
- require_admin：授权关卡。依赖 require_user，要求当前用户为管理员。

用法：
@router.get("/protected")
async def protected_route(ctx: AuthContext = Depends(require_user)):
    return {"user_id": ctx.user.id}

@router.post("/admin-only")
async def admin_route(ctx: AuthContext = Depends(require_admin)):
    ...

失败时抛出 AppError，由全局处理器返回 401 / 403。
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import Cookie, Depends
from sqlalchemy.exc import SQLAlchemyError

from ..models.user import User
from ..utils.errors import AppError, ErrorKind
from ..utils.logger import log
from .auth_service import get_token_service
from .security import TokenClaims, TokenService
from .storage import DatabaseStorage, get_storage

TOKEN_COOKIE = "token"


@dataclass(frozen=True)
class AuthContext:
    """请求级认证上下文"""
    user: User
    claims: TokenClaims


async def authenticate(
    token: Optional[str],
    tokens: TokenService,
    storage: DatabaseStorage,
) -> AuthContext:
    """认证关卡的核心逻辑：Cookie -> Token -> 用户"""
    if not token:
        raise AppError(ErrorKind.AUTHENTICATION)

    claims = tokens.verify(token)
    if claims is None:
        raise AppError(ErrorKind.AUTHENTICATION)

    try:
        user = await storage.get_user_by_id(claims.user_id)
    except SQLAlchemyError:
        log.exception("认证时查询用户失败")
        raise AppError(ErrorKind.UNEXPECTED)

    # 用户可能在 Token 签发后被删除
    if user is None:
        raise AppError(ErrorKind.AUTHENTICATION)

    return AuthContext(user=user, claims=claims)


def authorize_admin(ctx: Optional[AuthContext]) -> AuthContext:
    """授权关卡的核心逻辑：没有上下文或不是管理员都返回 403"""
    if ctx is None or ctx.user is None or not ctx.user.is_admin:
        raise AppError(ErrorKind.AUTHORIZATION)
    return ctx


async def require_user(
    token: Optional[str] = Cookie(default=None, alias=TOKEN_COOKIE),
    tokens: TokenService = Depends(get_token_service),
    storage: DatabaseStorage = Depends(get_storage),
) -> AuthContext:
    return await authenticate(token, tokens, storage)


async def require_admin(ctx: AuthContext = Depends(require_user)) -> AuthContext:
    return authorize_admin(ctx)
