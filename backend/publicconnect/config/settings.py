"""
后端基础配置（.env 自动加载 + Settings 对象）
---------------------------------
功能：
- 启动时自动加载项目根目录 `.env`（若存在），不覆盖已有环境变量。
- 定义 `Settings`：数据库地址、JWT 密钥/算法/有效期、bcrypt 成本、跨域源、上传目录等。
- `Settings.from_env()` 在启动时构造一次，由 `create_app(settings)` 注入到应用中，
  路由与服务通过依赖注入获取，不在模块级读取全局配置。

使用说明：
- 生产环境必须设置 `JWT_SECRET`，且 `APP_ENV=production`；缺失时启动直接失败。
- 开发/测试环境未设置 `JWT_SECRET` 时回退到内置默认值，并打印警告。
"""

from pathlib import Path
import os
from typing import List

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field

from ..utils.logger import log


# settings.py 位于 project_root/backend/publicconnect/config/
PROJECT_ROOT = Path(__file__).resolve().parents[3]
BACKEND_DIR = PROJECT_ROOT / "backend"

# 内置回退密钥：仅允许在非生产环境使用
DEFAULT_JWT_SECRET = "your-secret-key-change-in-production"
# Token 默认有效期：7 天
DEFAULT_JWT_EXPIRE_MINUTES = 60 * 24 * 7


def load_env_file() -> None:
    """加载 .env；`override=False` 保证系统环境变量优先。"""
    _found = find_dotenv(filename=".env", usecwd=True)
    if _found:
        load_dotenv(_found, override=False)
    else:
        load_dotenv(str(PROJECT_ROOT / ".env"), override=False)


class ConfigurationError(RuntimeError):
    """启动期配置错误。"""


class Settings(BaseModel):
    environment: str = "development"
    database_url: str = f"sqlite+aiosqlite:///{BACKEND_DIR / 'publicconnect.db'}"

    # --- JWT 认证配置 ---
    jwt_secret: str = DEFAULT_JWT_SECRET
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = DEFAULT_JWT_EXPIRE_MINUTES

    # bcrypt 成本因子
    bcrypt_rounds: int = Field(10, ge=4, le=31)

    frontend_origins: List[str] = Field(
        default_factory=lambda: ["http://localhost:5173", "http://localhost:5000"]
    )

    # --- 上传配置 ---
    upload_dir: Path = BACKEND_DIR / "uploads"
    max_upload_bytes: int = 5 * 1024 * 1024

    log_level: str = "INFO"

    # 启动时自动建表（SQLite 开发环境常用）
    create_tables: bool = True

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def cookie_max_age(self) -> int:
        """Cookie 有效期（秒），与 Token 过期时间一致。"""
        return self.jwt_expire_minutes * 60

    def check(self) -> "Settings":
        """校验启动配置；生产环境缺少密钥时抛出 ConfigurationError。"""
        if self.jwt_secret == DEFAULT_JWT_SECRET:
            if self.is_production:
                raise ConfigurationError("JWT_SECRET must be set in production")
            log.warning("JWT_SECRET 未设置，正在使用内置默认密钥（仅限开发环境）")
        return self

    @classmethod
    def from_env(cls) -> "Settings":
        """从环境变量（及 .env）构造配置对象。"""
        load_env_file()

        values = {}
        env_map = {
            "environment": "APP_ENV",
            "database_url": "DATABASE_URL",
            "jwt_secret": "JWT_SECRET",
            "jwt_algorithm": "JWT_ALGORITHM",
            "jwt_expire_minutes": "JWT_EXPIRE_MINUTES",
            "bcrypt_rounds": "BCRYPT_ROUNDS",
            "upload_dir": "UPLOAD_DIR",
            "max_upload_bytes": "MAX_UPLOAD_BYTES",
            "create_tables": "CREATE_TABLES",
            "log_level": "LOG_LEVEL",
        }
        for field, env_name in env_map.items():
            raw = os.getenv(env_name, "").strip()
            if raw:
                values[field] = raw

        _origins_csv = os.getenv("FRONTEND_ORIGINS", "").strip()
        if _origins_csv:
            values["frontend_origins"] = [o.strip() for o in _origins_csv.split(",") if o.strip()]

        return cls(**values).check()
