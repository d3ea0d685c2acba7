"""
后端入口（FastAPI 应用）
---------------------------------
功能：
- create_app(settings)：根据启动时构造的 Settings 创建应用，
  初始化数据库引擎、会话工厂、密码哈希器与 Token 服务并挂到 app.state。
- 配置 CORS（允许携带 Cookie），注册全局异常处理。
- 暴露健康检查接口 `/healthz`。
- 挂载认证、项目、媒体、投诉、活动、管理员路由，统一前缀 `/api`；
  上传文件通过 `/uploads` 静态目录访问。

运行：
- uvicorn --factory publicconnect.main:create_app --reload
"""

from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from .config.database import create_engine, create_session_factory, init_models
from .config.settings import Settings
from .routers.admin_router import router as admin_router
from .routers.auth_router import router as auth_router
from .routers.complaint_router import router as complaint_router
from .routers.event_router import router as event_router
from .routers.media_router import router as media_router
from .routers.project_router import router as project_router
from .services.security import PasswordHasher, TokenService
from .utils.errors import register_exception_handlers
from .utils.logger import configure_logging, log


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings.check() if settings else Settings.from_env()

    configure_logging(settings.log_level)
    app = FastAPI(title="PublicConnect API", version="1.0.0")

    engine = create_engine(settings.database_url)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    app.state.hasher = PasswordHasher(rounds=settings.bcrypt_rounds)
    app.state.tokens = TokenService(
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        expire_minutes=settings.jwt_expire_minutes,
    )

    # 允许前端跨域访问并携带 Cookie
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.frontend_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    @app.get("/healthz")
    async def healthz():
        """健康检查接口：用于确认服务已启动且可访问。"""
        return {"status": "ok"}

    # 挂载静态文件目录（用于提供上传的文件）
    settings.upload_dir.mkdir(parents=True, exist_ok=True)
    app.mount("/uploads", StaticFiles(directory=str(settings.upload_dir)), name="uploads")

    app.include_router(auth_router, prefix="/api/auth", tags=["auth"])
    app.include_router(project_router, prefix="/api/projects", tags=["projects"])
    app.include_router(media_router, prefix="/api/media", tags=["media"])
    app.include_router(complaint_router, prefix="/api/complaints", tags=["complaints"])
    app.include_router(event_router, prefix="/api/events", tags=["events"])
    app.include_router(admin_router, prefix="/api/admin", tags=["admin"])

    @app.on_event("startup")
    async def _create_tables():
        """开发环境启动时自动建表。"""
        if settings.create_tables:
            await init_models(engine)
            log.info("数据库表已就绪")

    @app.on_event("shutdown")
    async def _dispose_engine():
        await engine.dispose()

    log.info(f"PublicConnect API 已创建（环境：{settings.environment}）")
    return app
