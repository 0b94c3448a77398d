"""
Test fixtures shared across all tests.

Architecture:
- The app runs against a throwaway SQLite file. DATABASE_URL is set
  BEFORE anything imports app.config, because the engine is created
  at import time.
- pyproject.toml sets asyncio_default_fixture_loop_scope = session, so the
  table-creation fixture runs once for the whole session.
- The HTTP test client uses the real FastAPI app with its own sessions.
  Background tasks run to completion before the client call returns.
- Network services (noembed, Claude) are replaced with fakes; nothing
  here ever leaves the machine.
"""

import os
import tempfile
import uuid

_TEST_DB_DIR = tempfile.mkdtemp(prefix="video-summaries-test-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_DB_DIR}/test.db"

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from app.database import AsyncSessionLocal, Base, engine  # noqa: E402
from app.main import app  # noqa: E402
from app.models import JOB_PENDING, SummaryJob  # noqa: E402
from app.services import summary_pipeline  # noqa: E402
from app.services.prompts import INSUFFICIENT_INFORMATION_MESSAGE  # noqa: E402
from app.services.summarizer import InsufficientInformationError  # noqa: E402
from app.services.video_validation import ValidationResult  # noqa: E402


@pytest_asyncio.fixture(scope="session")
async def setup_db():
    """Create all tables once before the test session."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield


@pytest_asyncio.fixture
async def client(setup_db):
    """Async HTTP test client against the real FastAPI app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# --- Fake network services ---

class FakeVideoValidator:
    """Links containing "missing" don't exist; everything else does."""

    def __init__(self, *args, **kwargs):
        pass

    async def validate(self, url: str) -> ValidationResult:
        if "missing" in url:
            return ValidationResult(is_valid=False, error="Video not found. Please check the URL.")
        return ValidationResult(is_valid=True, title=f"Video {url.rsplit('=', 1)[-1]}")


class FakeSummaryService:
    """Links containing "obscure" get the not-enough-information answer."""

    def __init__(self, *args, **kwargs):
        pass

    def summarize(self, video_url: str, video_title: str, summary_length: str = "medium") -> str:
        if "obscure" in video_url:
            raise InsufficientInformationError(INSUFFICIENT_INFORMATION_MESSAGE)
        return (
            f"# {video_title}\n"
            f"A **{summary_length}** summary with *emphasis*.\n"
            "- first point\n"
            "- second point"
        )


@pytest.fixture
def fake_services(monkeypatch):
    """Swap the pipeline's validator and summarizer for offline fakes."""
    monkeypatch.setattr(summary_pipeline, "VideoValidator", FakeVideoValidator)
    monkeypatch.setattr(summary_pipeline, "SummaryService", FakeSummaryService)


# --- Seed data fixtures ---

@pytest_asyncio.fixture
async def make_job(setup_db):
    """Factory that commits a SummaryJob and returns it.

    Usage:
        job = await make_job(status="success", summary_markdown="# Hi")
    """
    async def _make_job(**fields) -> SummaryJob:
        values = {
            "batch_id": uuid.uuid4(),
            "position": 0,
            "url": f"https://www.youtube.com/watch?v={uuid.uuid4().hex[:11]}",
            "summary_length": "medium",
            "status": JOB_PENDING,
        }
        values.update(fields)
        job = SummaryJob(**values)
        async with AsyncSessionLocal() as session:
            session.add(job)
            await session.commit()
            await session.refresh(job)
        return job

    return _make_job
