"""
认证路由
---------------------------------
功能：
- POST /api/auth/register - 用户注册（201，写入 token Cookie）
- POST /api/auth/login    - 用户登录（写入 token Cookie）
- POST /api/auth/logout   - 退出登录（清除 Cookie，幂等）
- GET  /api/auth/user     - 获取当前用户信息
- GET  /api/auth/admin    - 校验当前用户是否为管理员

使用：
- Token 只通过 HttpOnly Cookie 下发，前端无需手动保存
- 返回的用户信息不包含密码哈希
"""

from fastapi import APIRouter, Depends, Request, Response, status

from ..models.auth_schema import (
    AdminCheckResponse,
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    UserResponse,
)
from ..models.response_schema import MessageResponse
from ..services.access_control import TOKEN_COOKIE, AuthContext, require_admin, require_user
from ..services.auth_service import AuthOutcome, AuthService, get_auth_service
from ..utils.errors import AppError

router = APIRouter()


def _set_token_cookie(request: Request, response: Response, token: str) -> None:
    settings = request.app.state.settings
    response.set_cookie(
        key=TOKEN_COOKIE,
        value=token,
        max_age=settings.cookie_max_age,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )


def _unwrap(outcome: AuthOutcome) -> AuthOutcome:
    if not outcome.ok:
        raise AppError(outcome.error, outcome.message)
    return outcome


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    req: RegisterRequest,
    request: Request,
    response: Response,
    auth: AuthService = Depends(get_auth_service),
):
    """
    用户注册

    请求体：
    - fullName / email / phone（10 位数字）/ password（至少 8 位）/ confirmPassword

    返回：
    - user: 新用户信息
    """
    outcome = _unwrap(await auth.register(req))
    _set_token_cookie(request, response, outcome.token)
    return {"user": outcome.user}


@router.post("/login", response_model=AuthResponse)
async def login(
    req: LoginRequest,
    request: Request,
    response: Response,
    auth: AuthService = Depends(get_auth_service),
):
    """用户登录；邮箱不存在与密码错误返回同样的提示"""
    outcome = _unwrap(await auth.login(req))
    _set_token_cookie(request, response, outcome.token)
    return {"user": outcome.user}


@router.post("/logout", response_model=MessageResponse)
async def logout(response: Response):
    response.delete_cookie(TOKEN_COOKIE)
    return {"message": "Logged out successfully"}


@router.get("/user", response_model=UserResponse)
async def get_me(ctx: AuthContext = Depends(require_user)):
    return ctx.user


@router.get("/admin", response_model=AdminCheckResponse)
async def check_admin(ctx: AuthContext = Depends(require_admin)):
    return {"is_admin": True}
