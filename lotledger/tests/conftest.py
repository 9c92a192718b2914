from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker

from lotledger.app.api.deps import get_db
from lotledger.app.db.base import Base
from lotledger.app.db.models.models_v1 import Lot, Product
from lotledger.app.db.session import build_engine
from lotledger.app.main import app

T0 = datetime(2026, 1, 1, 8, 0, tzinfo=timezone.utc)


@pytest.fixture(scope="function")
def engine(tmp_path):
    """
    Base SQLite fichier isolée par test.

    Fichier (et pas :memory:) pour que plusieurs connexions / threads
    voient la même base dans les tests de concurrence.
    """
    eng = build_engine(f"sqlite+pysqlite:///{tmp_path / 'lotledger.db'}")
    Base.metadata.create_all(bind=eng)
    try:
        yield eng
    finally:
        eng.dispose()


@pytest.fixture(scope="function")
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False)


@pytest.fixture(scope="function")
def db_session(session_factory) -> Session:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(session_factory):
    def _get_test_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _get_test_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def make_product(db_session):
    def _make(name="TEST-PROD"):
        p = Product(name=name)
        db_session.add(p)
        db_session.commit()
        return p

    return _make


@pytest.fixture
def make_lot(db_session):
    """Lot créé directement en base (quantity=0 sauf mention)."""

    def _make(product, *, age_days=0, created_at=None, quantity=Decimal("0"), description=None):
        lot = Lot(
            product_id=product.id,
            description=description,
            created_at=created_at or (T0 - timedelta(days=age_days)),
            quantity=quantity,
        )
        db_session.add(lot)
        db_session.commit()
        return lot

    return _make
