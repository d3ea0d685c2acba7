from __future__ import annotations

from init_db import seed


async def test_seed_inserts_demo_data_once(app, storage):
    first = await seed(storage, app.state.hasher)
    second = await seed(storage, app.state.hasher)

    assert first is True
    assert second is False
    assert len(await storage.get_projects()) == 1
    assert len(await storage.get_events()) == 1
    assert len(await storage.get_media_items()) == 2

    admin = await storage.get_user_by_email("admin@example.com")
    assert admin.is_admin is True
    assert app.state.hasher.verify("adminpassword", admin.password)

    john = await storage.get_user_by_email("john@example.com")
    assert [c.title for c in await storage.get_complaints(john.id)] == ["Broken Swing"]
