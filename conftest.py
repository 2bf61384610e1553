import os
import sys
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

REPO_ROOT = Path(__file__).parent

# Set environment variables BEFORE importing app modules; settings are cached
# for the life of the process.
os.environ["APP_ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["ADMIN_EMAIL_DOMAIN"] = "@admin.com"
os.environ.setdefault("LOG_LEVEL", "WARNING")

# Add the backend directory to sys.path so imports work without an install
BACKEND_PATH = REPO_ROOT / "fastapi-backend"
if str(BACKEND_PATH) not in sys.path:
    sys.path.insert(0, str(BACKEND_PATH))

from campus_api.database import Database  # noqa: E402
from campus_api.main import app  # noqa: E402


@pytest_asyncio.fixture
async def database(tmp_path):
    """A fresh SQLite database per test."""
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await db.connect()
    yield db
    await db.disconnect()


@pytest_asyncio.fixture
async def session(database):
    async with database.session() as s:
        yield s


@pytest_asyncio.fixture
async def client(database):
    # ASGITransport does not run startup events; install the database directly.
    app.state.database = database
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
    app.state.database = None


@pytest.fixture
def complaint_form():
    return {
        "username": "ravi",
        "complaintText": "Ceiling fan not working",
        "date": "2024-03-01",
        "location": "hostel",
        "subLocation": "Block A",
        "roomNo": "A-204",
    }
