"""
认证服务
---------------------------------
功能：
- register：检查邮箱占用 -> 哈希密码 -> 创建普通用户 -> 签发 Token
- login：按邮箱查找 -> 校验密码 -> 签发 Token

约定：
- 不用异常表达业务失败，统一返回 AuthOutcome（成功时带 user/token，失败时带 ErrorKind 与提示）
- bcrypt 计算放到线程池执行，避免阻塞事件循环
- 登录失败（邮箱不存在 / 密码错误）返回同一提示，且两条路径都执行一次 bcrypt
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Request
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.exc import SQLAlchemyError

from ..models.auth_schema import LoginRequest, RegisterRequest
from ..models.user import User
from ..utils.errors import ErrorKind
from ..utils.logger import log
from .security import PasswordHasher, TokenService
from .storage import DatabaseStorage, get_storage

EMAIL_IN_USE = "Email already in use"
INVALID_CREDENTIALS = "Invalid email or password"
REGISTER_FAILED = "Failed to register user"
LOGIN_FAILED = "Failed to login"


@dataclass
class AuthOutcome:
    user: Optional[User] = None
    token: Optional[str] = None
    error: Optional[ErrorKind] = None
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, user: User, token: str) -> "AuthOutcome":
        return cls(user=user, token=token)

    @classmethod
    def failure(cls, error: ErrorKind, message: str) -> "AuthOutcome":
        return cls(error=error, message=message)


class AuthService:
    def __init__(self, storage: DatabaseStorage, hasher: PasswordHasher, tokens: TokenService):
        self.storage = storage
        self.hasher = hasher
        self.tokens = tokens

    async def register(self, req: RegisterRequest) -> AuthOutcome:
        """
        注册新用户（管理员标记强制为 False）

        邮箱检查与插入之间存在竞争窗口：并发注册同一邮箱时，后插入者会触发
        数据库唯一约束，这里按未预期错误处理（500），不会导致进程崩溃。
        """
        try:
            existing = await self.storage.get_user_by_email(req.email)
        except SQLAlchemyError:
            log.exception("注册时查询邮箱失败")
            return AuthOutcome.failure(ErrorKind.UNEXPECTED, REGISTER_FAILED)

        if existing is not None:
            return AuthOutcome.failure(ErrorKind.CONFLICT, EMAIL_IN_USE)

        hashed = await run_in_threadpool(self.hasher.hash, req.password)
        try:
            user = await self.storage.create_user(
                full_name=req.full_name,
                email=req.email,
                phone=req.phone,
                password_hash=hashed,
                is_admin=False,
            )
        except SQLAlchemyError:
            log.exception("注册时创建用户失败")
            return AuthOutcome.failure(ErrorKind.UNEXPECTED, REGISTER_FAILED)

        log.info(f"新用户注册：{user.id}")
        return AuthOutcome.success(user, self.tokens.issue(user.id))

    async def login(self, req: LoginRequest) -> AuthOutcome:
        """邮箱 + 密码登录"""
        try:
            user = await self.storage.get_user_by_email(req.email)
        except SQLAlchemyError:
            log.exception("登录时查询用户失败")
            return AuthOutcome.failure(ErrorKind.UNEXPECTED, LOGIN_FAILED)

        if user is None:
            await run_in_threadpool(self.hasher.dummy_verify)
            return AuthOutcome.failure(ErrorKind.AUTHENTICATION, INVALID_CREDENTIALS)

        matched = await run_in_threadpool(self.hasher.verify, req.password, user.password)
        if not matched:
            return AuthOutcome.failure(ErrorKind.AUTHENTICATION, INVALID_CREDENTIALS)

        log.info(f"用户登录：{user.id}")
        return AuthOutcome.success(user, self.tokens.issue(user.id))


def get_hasher(request: Request) -> PasswordHasher:
    return request.app.state.hasher


def get_token_service(request: Request) -> TokenService:
    return request.app.state.tokens


async def get_auth_service(
    storage: DatabaseStorage = Depends(get_storage),
    hasher: PasswordHasher = Depends(get_hasher),
    tokens: TokenService = Depends(get_token_service),
) -> AuthService:
    """依赖注入：组装认证服务"""
    return AuthService(storage, hasher, tokens)
