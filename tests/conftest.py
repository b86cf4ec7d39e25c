import os

# Pin configuration before any storefront_admin module reads settings
os.environ["APP_DATABASE__DATABASE_URL"] = "sqlite://"
os.environ["APP_DATABASE__CREATE_TABLES"] = "false"
os.environ["APP_CACHE__ENABLED"] = "false"
os.environ["APP_RATE_LIMIT_ENABLED"] = "false"

from typing import Callable, Generator, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

import storefront_admin.models  # noqa: F401  (registers tables)
from storefront_admin.db.base import Base
from storefront_admin.db.session import get_db
from storefront_admin.domain.unit_of_work import UnitOfWork
from storefront_admin.main import app
from storefront_admin.models.category_model import Category
from storefront_admin.schemas.category_schema import CategorySchema
from storefront_admin.services.category_service import CategoryService


@pytest.fixture(scope="function")
def engine() -> Generator[Engine, None, None]:
    """A private in-memory database per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(
        bind=engine, autocommit=False, autoflush=False, expire_on_commit=False
    )


@pytest.fixture(scope="function")
def db_session(session_factory: sessionmaker) -> Generator[Session, None, None]:
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def uow(db_session: Session) -> UnitOfWork:
    return UnitOfWork(db_session)


@pytest.fixture
def category_service(uow: UnitOfWork) -> CategoryService:
    return CategoryService(uow)


@pytest.fixture
def make_category(category_service: CategoryService) -> Callable[..., Category]:
    """Create categories through the service, optionally under a parent."""

    def _make(name: str, parent: Optional[Category] = None, **fields) -> Category:
        payload = CategorySchema.Create(
            name=name,
            parent_id=parent.category_id if parent else None,
            **fields,
        )
        return category_service.create(payload)

    return _make


@pytest.fixture(scope="function")
def client(session_factory: sessionmaker) -> Generator[TestClient, None, None]:
    """Create a test client whose requests use the per-test database."""

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()
