"""
数据库连接配置
---------------------------------
功能：
- 根据 Settings 创建异步数据库引擎（默认 SQLite + aiosqlite）
- 提供会话工厂与建表函数
- 提供依赖注入函数供路由使用

使用：
- 在路由中通过 Depends(get_db) 获取数据库会话
- 引擎与会话工厂挂在 app.state 上，由 create_app 负责创建
"""

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from ..models.base import Base


def create_engine(database_url: str) -> AsyncEngine:
    """创建异步引擎"""
    return create_async_engine(
        database_url,
        echo=False,  # 生产环境设为 False
        future=True,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    """创建异步会话工厂"""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def init_models(engine: AsyncEngine, drop: bool = False) -> None:
    """创建所有表（drop=True 时先删除再重建）"""
    # 导入模型，确保注册到 Base.metadata
    from ..models import complaint, content, user  # noqa: F401

    async with engine.begin() as conn:
        if drop:
            await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)


async def get_db(request: Request):
    """
    依赖注入：获取数据库会话

    使用示例：
    @router.get("/example")
    async def example(db: AsyncSession = Depends(get_db)):
        ...
    """
    async with request.app.state.session_factory() as session:
        try:
            yield session
        finally:
            await session.close()
