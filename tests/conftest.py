from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

import app.persistence.pg as pg
from app.core.config import get_settings
from app.core.security import Principal
from app.domain.orders.commands import place_order
from app.persistence.models import Base, UserModel
from app.persistence.repositories import OrderRepository, UserRepository


@pytest.fixture(scope="session")
def test_db_path(tmp_path_factory: pytest.TempPathFactory) -> Path:
    return tmp_path_factory.mktemp("db") / "test.sqlite"


@pytest.fixture(scope="session", autouse=True)
def configure_test_engine(test_db_path: Path):
    settings = get_settings()
    settings.auth_enabled = True
    settings.bootstrap_demo_on_startup = False

    engine = pg.create_engine_from_url(f"sqlite+pysqlite:///{test_db_path}")
    TestSessionLocal = pg.make_session_factory(engine)

    pg.engine = engine
    pg.SessionLocal = TestSessionLocal

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def clean_tables(configure_test_engine):
    yield
    with pg.engine.begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            conn.execute(table.delete())


@pytest.fixture()
def client(configure_test_engine):
    from app.main import app

    with TestClient(app) as c:
        yield c


@pytest.fixture()
def session(configure_test_engine):
    with pg.session_scope() as s:
        yield s


@pytest.fixture()
def users(configure_test_engine):
    settings = get_settings()
    with pg.session_scope() as s:
        repo = UserRepository(s)
        admin = repo.add(
            UserModel(user_id=settings.admin_user_id, email="admin@example.com", name="Admin", role="admin")
        )
        customer = repo.add(
            UserModel(user_id=settings.user_user_id, email="customer@example.com", name="Customer", role="user")
        )
    return {"admin": admin, "user": customer}


@pytest.fixture()
def admin(users) -> Principal:
    row = users["admin"]
    return Principal(id=row.user_id, role=row.role, email=row.email)


@pytest.fixture()
def auth_headers():
    settings = get_settings()
    return {
        "admin": {"X-API-Key": settings.admin_api_key},
        "user": {"X-API-Key": settings.user_api_key},
    }


@pytest.fixture()
def make_order(configure_test_engine):
    def _make(
        status: str = "pending",
        payment_status: str = "pending",
        items: list[dict] | None = None,
        **kwargs,
    ) -> str:
        if items is None:
            items = [{"product_id": "prod-1", "size": "M", "quantity": 2, "unit_price": 1250}]
        with pg.session_scope() as s:
            order = place_order(
                OrderRepository(s),
                user_id=kwargs.pop("user_id", None),
                items=items,
                status=status,
                payment_status=payment_status,
                **kwargs,
            )
            return order.order_id

    return _make


@pytest.fixture()
def read_order(configure_test_engine):
    def _read(order_id: str):
        with pg.session_scope() as s:
            return OrderRepository(s).find_by_id(order_id)

    return _read
