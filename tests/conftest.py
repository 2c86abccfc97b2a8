import pytest
from fastapi.testclient import TestClient

from string_analyzer.config import Settings
from string_analyzer.database import Database
from string_analyzer.main import create_app


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite:///{tmp_path / 'test_strings.db'}"


@pytest.fixture
def settings(database_url):
    return Settings(database_url=database_url, rate_limit_enabled=False, cors_origins=["*"])


@pytest.fixture
def client(settings):
    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def db(database_url):
    database = Database(database_url)
    database.init()
    sessions = database.session()
    session = next(sessions)
    yield session
    sessions.close()
    database.dispose()
