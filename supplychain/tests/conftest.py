from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from supplychain.app.api.deps import get_db, get_session_factory
from supplychain.app.core.config import Settings, get_settings
from supplychain.app.db.base import Base
from supplychain.app.db.models import models_v1  # noqa: F401  (enregistre les tables)
from supplychain.app.db.models.models_v1 import Customer, Product, RawMaterial, BillOfMaterial


@pytest.fixture(scope="function")
def engine():
    """
    Base SQLite en mémoire, neuve pour chaque test.

    StaticPool : une seule connexion partagée, visible depuis le thread
    du TestClient.
    """
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(eng, "connect")
    def _fk_on(dbapi_connection, _record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(bind=eng)
    try:
        yield eng
    finally:
        Base.metadata.drop_all(bind=eng)
        eng.dispose()


@pytest.fixture(scope="function")
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


@pytest.fixture(scope="function")
def db_session(session_factory) -> Session:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def test_settings() -> Settings:
    return Settings(
        DATABASE_URL="sqlite://",
        AUTH_ENABLED=False,
        LOW_STOCK_ENABLED=False,
        LOW_STOCK_EMAIL_TO="procurement@supplychainx.com, ops@supplychainx.com",
        SMTP_HOST="smtp.test.local",
        SMTP_SENDER="alerts@supplychainx.com",
    )


@pytest.fixture(scope="function")
def client(db_session, session_factory, test_settings):
    from supplychain.app.main import app

    def _get_db():
        yield db_session

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


# ---------- FACTORIES ----------
@pytest.fixture
def make_product(db_session):
    def _make(name="Chaise", stock=50, cost="100.0", production_time=2):
        product = Product(name=name, stock=stock, cost=Decimal(cost), production_time=production_time)
        db_session.add(product)
        db_session.flush()
        return product

    return _make


@pytest.fixture
def make_customer(db_session):
    def _make(name="Atelier Dupont", address="12 rue des Forges", city="Lyon"):
        customer = Customer(name=name, address=address, city=city)
        db_session.add(customer)
        db_session.flush()
        return customer

    return _make


@pytest.fixture
def make_material(db_session):
    def _make(name="Bois", stock=20, stock_min=5, unit="kg"):
        material = RawMaterial(name=name, stock=stock, stock_min=stock_min, unit=unit)
        db_session.add(material)
        db_session.flush()
        return material

    return _make


@pytest.fixture
def make_bom(db_session):
    def _make(product, material, quantity):
        bom = BillOfMaterial(product=product, material=material, quantity=quantity)
        db_session.add(bom)
        db_session.flush()
        return bom

    return _make
