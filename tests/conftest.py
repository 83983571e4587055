import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import main
from stockscan.database import Base, get_db
from stockscan.models import product  # noqa: F401


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    db = session_factory()
    yield db
    db.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    main.app.dependency_overrides[get_db] = override_get_db
    yield TestClient(main.app)
    main.app.dependency_overrides.clear()


@pytest.fixture
def pen():
    return {
        "barcode": "123",
        "name": "Pen",
        "category": "Stationery",
        "cost": 10,
        "stock": 5,
        "minStock": 10,
    }


@pytest.fixture
def create_product(client):
    def _create(**fields):
        payload = {"name": "Item", "category": "Misc", "cost": 1, **fields}
        response = client.post("/api/products", json=payload)
        assert response.status_code == 201, response.text
        return response.json()["product"]

    return _create
