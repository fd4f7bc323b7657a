import pytest
from fastapi.testclient import TestClient

import fakeredis
import fakeredis.aioredis

from prepline.deps import get_ingestion
from prepline.infra import redis_client
from prepline.infra.kv_store import MemoryKeyValueStore
from prepline.main import app
from prepline.parsing import CorrectionStore, IngredientCatalog, IngredientParser
from prepline.services.ingestion import IngestionService


@pytest.fixture
def store():
    return MemoryKeyValueStore()


@pytest.fixture
def catalog(store):
    return IngredientCatalog(store=store)


@pytest.fixture
def parser(catalog):
    """Rule-based parser with no learned corrections."""
    return IngredientParser(catalog)


@pytest.fixture
def corrections(store, catalog):
    return CorrectionStore(store, catalog=catalog)


@pytest.fixture
def ingestion(catalog, corrections):
    return IngestionService(catalog, corrections)


@pytest.fixture
def client(ingestion):
    """Test client wired to a fresh in-memory pipeline."""
    app.dependency_overrides[get_ingestion] = lambda: ingestion
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def fake_redis():
    server = fakeredis.FakeServer()
    return fakeredis.aioredis.FakeRedis(server=server, decode_responses=True)


@pytest.fixture(autouse=True)
def mock_redis(fake_redis):
    # Force the fake client into the infra module
    redis_client._redis_async = fake_redis
    yield
    redis_client._redis_async = None
