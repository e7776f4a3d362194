"""
Configuration for pytest tests.
"""

import os
import tempfile
from pathlib import Path

# Settings are read when notetube is first imported, so set them before any test module loads it
_TEST_ROOT = Path(tempfile.mkdtemp(prefix="notetube-tests-"))
os.environ["GROQ_API_KEY"] = os.environ.get("GROQ_API_KEY", "test_api_key")
os.environ["YOUTUBE_API_KEYS"] = "test-key-1,test-key-2"
os.environ["DATA_DIR"] = str(_TEST_ROOT / "data")
os.environ["TEMP_AUDIO_DIR"] = str(_TEST_ROOT / "audio")
os.environ["DATABASE_URL"] = f"sqlite:///{_TEST_ROOT}/notetube-test.db"
os.environ["ENVIRONMENT"] = "development"
os.environ["LOG_DIR"] = str(_TEST_ROOT / "logs")

import pytest
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from notetube.db.database import init_db, make_engine
from notetube.models.schemas import VideoInfo


@pytest.fixture(scope="session", autouse=True)
def cleanup_test_root():
    """Remove the scratch directory after the session."""
    yield

    import shutil
    shutil.rmtree(_TEST_ROOT, ignore_errors=True)


@pytest.fixture
def db_engine():
    """In-memory SQLite engine shared across threads."""
    engine = make_engine("sqlite://", poolclass=StaticPool)
    init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def test_video_id():
    """Return a test YouTube video ID."""
    return "dQw4w9WgXcQ"


@pytest.fixture
def video_info(test_video_id):
    return VideoInfo(
        id=test_video_id,
        title="Intro to Thermodynamics",
        channel_title="Physics Lab",
        thumbnail="https://i.ytimg.com/vi/dQw4w9WgXcQ/maxresdefault.jpg",
        has_captions=True,
    )
