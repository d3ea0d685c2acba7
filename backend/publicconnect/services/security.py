"""
安全工具
---------------------------------
功能：
- PasswordHasher：密码哈希与验证（使用 bcrypt，盐与成本因子内嵌在哈希中）
- TokenService：JWT Token 生成与解码（{id, exp}，默认 7 天有效）

使用：
- 注册时：hasher.hash() 对密码加密
- 登录时：hasher.verify() 验证密码；邮箱不存在时 hasher.dummy_verify() 保持耗时一致
- 生成Token：tokens.issue(user_id)
- 验证Token：tokens.verify(token)，失败返回 None，从不抛异常

两者都是无状态对象，由 create_app 根据 Settings 构造一次后挂到 app.state。
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from jose import JWTError, jwt
from passlib.context import CryptContext


class PasswordHasher:
    """bcrypt 密码哈希"""

    def __init__(self, rounds: int = 10):
        self._context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds,
        )

    def hash(self, password: str) -> str:
        """
        对密码进行哈希加密

        Args:
            password: 明文密码

        Returns:
            加密后的密码哈希（每次调用使用新的随机盐）
        """
        return self._context.hash(password)

    def verify(self, password: str, hashed_password: str) -> bool:
        """
        验证密码是否正确

        Args:
            password: 明文密码
            hashed_password: 数据库中存储的密码哈希

        Returns:
            密码是否匹配；哈希格式非法时返回 False
        """
        try:
            return self._context.verify(password, hashed_password)
        except (ValueError, TypeError):
            return False

    def dummy_verify(self) -> bool:
        """执行一次等价耗时的假验证，始终返回 False"""
        self._context.dummy_verify()
        return False


@dataclass(frozen=True)
class TokenClaims:
    user_id: int
    expires_at: datetime


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenService:
    """签名 Token 的签发与校验（HS256）"""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        expire_minutes: int = 60 * 24 * 7,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._secret = secret
        self._algorithm = algorithm
        self.expires_in = timedelta(minutes=expire_minutes)
        self._clock = clock

    def issue(self, user_id: int, now: Optional[datetime] = None) -> str:
        """
        创建 JWT Token

        Args:
            user_id: 用户ID
            now: 签发时间（默认当前时间）

        Returns:
            JWT Token 字符串
        """
        issued_at = now or self._clock()
        claims = {
            "id": user_id,
            "iat": int(issued_at.timestamp()),
            "exp": int((issued_at + self.expires_in).timestamp()),
        }
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> Optional[TokenClaims]:
        """
        解码并验证 JWT Token

        过期时间使用注入的时钟判断，签名由 jose 校验。

        Returns:
            TokenClaims，验证失败返回 None
        """
        if not token or not isinstance(token, str):
            return None
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"verify_exp": False, "verify_iat": False},
            )
        except JWTError:
            return None

        user_id = payload.get("id")
        exp = payload.get("exp")
        # bool 是 int 的子类，需要单独排除
        if not isinstance(user_id, int) or isinstance(user_id, bool):
            return None
        if not isinstance(exp, (int, float)):
            return None

        expires_at = datetime.fromtimestamp(exp, tz=timezone.utc)
        if expires_at <= self._clock():
            return None
        return TokenClaims(user_id=user_id, expires_at=expires_at)
