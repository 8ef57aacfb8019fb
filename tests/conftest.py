import os
import tempfile
import uuid
from datetime import datetime, timezone

import pytest

# Point the app at a throwaway database before anything imports busops.config.
_TMP_DIR = tempfile.mkdtemp(prefix="busops-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_TMP_DIR, 'test.sqlite3')}"
os.environ["API_KEY"] = ""


@pytest.fixture(autouse=True, scope="session")
def setup_test_db():
    import asyncio

    from busops.config import settings
    settings.api_key = ""

    from busops.database import create_tables, async_session, engine
    from busops.seed import seed_data

    async def _setup():
        await create_tables()
        async with async_session() as session:
            await seed_data(session)
        await engine.dispose()

    asyncio.run(_setup())


async def make_driver(name: str = "Test Driver") -> str:
    """Insert a fresh driver so tests never share clock state."""
    from busops.database import async_session
    from busops.models.driver import Driver

    driver_id = str(uuid.uuid4())
    async with async_session() as session:
        session.add(Driver(
            id=driver_id,
            full_name=f"{name} {driver_id[:8]}",
            created_at=datetime.now(timezone.utc).isoformat(),
        ))
        await session.commit()
    return driver_id
