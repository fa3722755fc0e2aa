import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.db import Base, EngineOptions, GetDb
from app.modules.chores import models as chores_models  # noqa: F401
from app.modules.chores.router import EnsureChoresStorageReady
from app.modules.chores.router import router as chores_router

SQLITE_URL = "sqlite://"


@pytest.fixture
def db_session():
    engine = create_engine(
        SQLITE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        **EngineOptions(SQLITE_URL),
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def client(db_session):
    app = FastAPI()
    app.include_router(chores_router)

    def _override_db():
        yield db_session

    app.dependency_overrides[GetDb] = _override_db
    app.dependency_overrides[EnsureChoresStorageReady] = lambda: None
    with TestClient(app) as test_client:
        yield test_client
