"""
数据库初始化脚本
---------------------------------
功能：
- 创建 users / projects / media_items / complaints / events 表
- 可选：写入演示数据（管理员、普通用户、项目、媒体、活动、投诉）

使用：
python backend/init_db.py            # 仅建表
python backend/init_db.py --seed     # 建表并写入演示数据（已写入过则跳过）
python backend/init_db.py --drop     # 删除后重建
"""

import argparse
import asyncio
from datetime import timedelta

from publicconnect.config.database import create_engine, create_session_factory, init_models
from publicconnect.config.settings import Settings
from publicconnect.models.base import Base, utcnow
from publicconnect.services.security import PasswordHasher
from publicconnect.services.storage import DatabaseStorage
from publicconnect.utils.logger import log

USER_SEEDS = [
    {
        "full_name": "Admin User",
        "email": "admin@example.com",
        "phone": "1234567890",
        "password": "adminpassword",
        "is_admin": True,
    },
    {
        "full_name": "John Doe",
        "email": "john@example.com",
        "phone": "9876543210",
        "password": "password123",
        "is_admin": False,
    },
]


async def seed(storage: DatabaseStorage, hasher: PasswordHasher) -> bool:
    """写入演示数据；管理员账号已存在时视为已初始化，整体跳过"""
    if await storage.get_user_by_email(USER_SEEDS[0]["email"]) is not None:
        log.info("演示数据已存在，跳过写入")
        return False

    users = []
    for data in USER_SEEDS:
        user = await storage.create_user(
            full_name=data["full_name"],
            email=data["email"],
            phone=data["phone"],
            password_hash=hasher.hash(data["password"]),
            is_admin=data["is_admin"],
        )
        users.append(user)

    now = utcnow()
    await storage.create_project({
        "title": "Community Park Renovation",
        "description": "Renovating the central community park.",
        "status": "in-progress",
        "category": "Infrastructure",
        "start_date": now,
    })
    await storage.create_media_item({
        "title": "Renovation Plan",
        "type": "document",
        "url": "https://example.com/plan.pdf",
        "description": "Project plan document",
    })
    await storage.create_media_item({
        "title": "Park Image",
        "type": "image",
        "url": "https://example.com/park.jpg",
        "description": "Image of the park",
    })
    await storage.create_event({
        "title": "Town Hall Meeting",
        "description": "Discussing the park renovation project.",
        "location": "Community Center",
        "date": now + timedelta(days=7),
    })
    await storage.create_complaint({
        "user_id": users[1].id,
        "title": "Broken Swing",
        "description": "The swing in the park is broken.",
        "category": "Maintenance",
        "location": "Central Park",
        "status": "pending",
        "attachments": [],
    })
    return True


async def init_database(with_seed: bool = False, drop: bool = False):
    """初始化数据库表"""
    settings = Settings.from_env()
    log.info("正在初始化数据库...")

    engine = create_engine(settings.database_url)
    try:
        await init_models(engine, drop=drop)
        log.info(f"已创建表：{', '.join(Base.metadata.tables.keys())}")

        if with_seed:
            async with create_session_factory(engine)() as session:
                seeded = await seed(DatabaseStorage(session), PasswordHasher(rounds=settings.bcrypt_rounds))
            if seeded:
                log.info("演示数据写入完成")
    finally:
        await engine.dispose()

    log.info(f"数据库位置：{settings.database_url}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="初始化 PublicConnect 数据库")
    parser.add_argument("--seed", action="store_true", help="写入演示数据")
    parser.add_argument("--drop", action="store_true", help="删除已有表后重建")
    args = parser.parse_args()
    asyncio.run(init_database(with_seed=args.seed, drop=args.drop))
