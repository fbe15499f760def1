"""
Shared test fixtures: SQLite database, test client, loaded reference data,
a fresh store/service per test.
"""

import json
import os
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

# Point settings at the test database before importing app modules
os.environ["DATABASE_URL"] = "sqlite:///./test.db"

from blindquote.config import DEFAULT_REFERENCE_DATA
from blindquote.config_provider import ConfigProvider
from blindquote.database import Base, get_db
from blindquote.dependencies import build_quote_service, get_quote_service
from blindquote.main import app
from blindquote.state.quote_reducer import QuoteDeps
from blindquote.strategies.registry import ProductFactory


TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_database():
    """Create all tables before each test, drop after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


# --- Reference data ---

@pytest.fixture
def reference_data():
    """The packaged reference data as a plain dict (safe to mutate per test)."""
    with open(DEFAULT_REFERENCE_DATA, "r", encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture
def config(reference_data):
    """A ConfigProvider loaded with the packaged reference data."""
    provider = ConfigProvider()
    assert provider.load_data(reference_data)
    return provider


@pytest.fixture
def empty_config():
    """A ConfigProvider that was never loaded."""
    return ConfigProvider()


@pytest.fixture
def factory(config):
    return ProductFactory(config)


@pytest.fixture
def deps(config, factory):
    return QuoteDeps(product_factory=factory, config=config)


@pytest.fixture
def strategy(factory):
    return factory.get_product_strategy("roller_blind")


# --- Service / HTTP ---

@pytest.fixture
def service(config):
    """A QuoteService over a fresh store."""
    return build_quote_service(config)


@pytest.fixture
def client(service):
    """FastAPI test client bound to the per-test service."""
    app.dependency_overrides[get_quote_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.pop(get_quote_service, None)


@pytest.fixture
def db():
    """Direct database session for test setup/assertions."""
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()

