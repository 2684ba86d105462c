# pylint: disable=redefined-outer-name
import pytest
import requests
from fastapi.testclient import TestClient
from tenacity import retry, stop_after_delay

from config import get_api_url
from cases.adapters.repository import InMemoryCaseRepository, RedisCaseRepository
from cases.entrypoints.case_api import create_app
from uploads.adapters.repository import LocalFileStore

pytest.register_assert_rewrite("tests.e2e.api_client")

@retry(stop=stop_after_delay(60))
def wait_for_webapp_to_come_up():
    return requests.get(f"{get_api_url()}/health", timeout=1)

@pytest.fixture(autouse=True)
def no_cases_token(monkeypatch):
    """Tests run with open write routes unless they set CASES_TOKEN themselves."""
    monkeypatch.delenv("CASES_TOKEN", raising=False)

@pytest.fixture
def memory_repository():
    return InMemoryCaseRepository()

@pytest.fixture
def fake_redis():
    import fakeredis
    return fakeredis.FakeRedis()

@pytest.fixture
def redis_repository(fake_redis):
    return RedisCaseRepository(fake_redis)

@pytest.fixture(params=["memory", "redis"])
def repository(request, fake_redis):
    """Run store tests against both backends."""
    if request.param == "memory":
        return InMemoryCaseRepository()
    return RedisCaseRepository(fake_redis)

@pytest.fixture
def uploads_dir(tmp_path):
    return tmp_path / "uploads"

@pytest.fixture
def api_client(memory_repository, uploads_dir):
    """Case API with an in-memory store and local uploads."""
    app = create_app(repository=memory_repository, file_store=LocalFileStore(uploads_dir))
    return TestClient(app)

@pytest.fixture
def restart_api():
    wait_for_webapp_to_come_up()

