import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.data.database import init_db, make_engine
from app.main import create_app
from app.repos.kv_repo import KeyValueRepo
from app.services.state_service import StateService


@pytest.fixture
def engine():
    """Sqlite w pamieci, wspolna dla wszystkich sesji jednego testu."""
    engine = make_engine("sqlite://", poolclass=StaticPool)
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def kv_repo(engine):
    return KeyValueRepo(sessionmaker(bind=engine, autocommit=False, autoflush=False))


@pytest.fixture
def state(kv_repo):
    """StateService wczytany z pustego magazynu."""
    svc = StateService(kv_repo, key_prefix="test")
    svc.load()
    return svc


@pytest.fixture
def client(state):
    return TestClient(create_app(state))

