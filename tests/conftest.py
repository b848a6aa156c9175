import pytest

from sonumarket.catalog.models import Product
from sonumarket.catalog.store import CatalogStore
from sonumarket.db.sqlite import SqliteStorage
from sonumarket.services.payments import SimulatedMobileMoney
from sonumarket.session import Session


@pytest.fixture
def p1() -> Product:
    return Product(id="p1", name="Souris USB", price=1000, rating=4.0, category="Périphériques")


@pytest.fixture
def p2() -> Product:
    return Product(id="p2", name="Écran 27 pouces", price=600000, rating=4.5, category="Périphériques")


@pytest.fixture
def catalog() -> CatalogStore:
    return CatalogStore()


@pytest.fixture
def storage(tmp_path) -> SqliteStorage:
    s = SqliteStorage(str(tmp_path / "test.db"))
    s.init_db()
    return s


@pytest.fixture
def session(storage) -> Session:
    return Session.restore(storage, charge=SimulatedMobileMoney(0))
