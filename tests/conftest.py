import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# The module-level engine is created on import, so point it at SQLite first.
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")

from cohort_efforts.db import Base  # noqa: E402
from cohort_efforts.db import get_db  # noqa: E402
from cohort_efforts.main import app  # noqa: E402


@pytest.fixture
def db_session():
    test_engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    testing_session_local = sessionmaker(
        bind=test_engine,
        autoflush=False,
        autocommit=False,
    )
    Base.metadata.create_all(bind=test_engine)

    db = testing_session_local()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def db_client(db_session) -> TestClient:
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
