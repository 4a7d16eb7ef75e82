import pytest
from fastapi.testclient import TestClient

from app.config import Settings
from app.database import Database
from app.main import create_app


@pytest.fixture(scope="session")
def settings(tmp_path_factory):
    """Settings pointing at a throwaway SQLite file."""
    db_file = tmp_path_factory.mktemp("data") / "test.db"
    return Settings(DATABASE_URL=f"sqlite:///{db_file}", DB_POOL_SIZE=5)


@pytest.fixture(scope="session")
def app(settings):
    return create_app(settings)


@pytest.fixture(scope="session")
def _running_client(app):
    # Entering the client runs the lifespan, which opens the database once
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture(scope="function")
def client(app, _running_client):
    """Test client with an empty products table."""
    app.state.database.clear()
    yield _running_client


@pytest.fixture(scope="function")
def database(app, _running_client) -> Database:
    """The application's datastore handle, emptied before the test."""
    app.state.database.clear()
    return app.state.database


@pytest.fixture(scope="function")
def db_session(database):
    """Session for direct repository access in tests."""
    session = database.session()

    yield session

    session.close()


@pytest.fixture
def create_product(client):
    """Create a product through the API and return its `data` payload."""
    def _create(name="Test Product", price=99.99, stock=10):
        response = client.post(
            "/products",
            json={"name": name, "price": price, "stock": stock}
        )
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _create
