import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from dooriq.database import Base, get_db, init_db
from dooriq.main import app


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(engine):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        db = TestingSession()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def payload():
    """AI grading payload with category points summing to 80."""
    return {
        "opening_introduction": {"points": 12, "reason": "Clear greeting"},
        "rapport_building": {"points": 13},
        "needs_discovery": {"points": 15},
        "value_communication": {"points": 12},
        "objection_handling": {"points": 16},
        "closing": {"points": 12},
        "deductions": [{"reason": "interrupted homeowner", "points": -5}],
    }
