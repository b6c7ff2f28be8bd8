from pathlib import Path

import pytest
from sqlalchemy.orm import Session, sessionmaker

from invoicekit.actions import InvoiceActions
from invoicekit.cache import InMemoryViewCache
from invoicekit.config import Settings
from invoicekit.database import build_session_factory
from invoicekit.store import CUSTOMERS, SqlRecordStore


class RecordingCache(InMemoryViewCache):
    """Keeps the invalidated keys, and the shared event order, for assertions."""

    def __init__(self, events: list[str]) -> None:
        super().__init__()
        self.events = events
        self.invalidations: list[str] = []

    def invalidate(self, key: str) -> None:
        self.events.append(f"invalidate:{key}")
        self.invalidations.append(key)
        super().invalidate(key)


@pytest.fixture()
def test_settings(tmp_path: Path) -> Settings:
    return Settings(
        app_name="invoicekit",
        database_url=f"sqlite:///{tmp_path / 'test.db'}",
        log_level="INFO",
        invoices_view="/dashboard/invoices",
    )


@pytest.fixture()
def session_factory(test_settings: Settings) -> sessionmaker[Session]:
    return build_session_factory(test_settings.database_url)


@pytest.fixture()
def store(session_factory: sessionmaker[Session]) -> SqlRecordStore:
    return SqlRecordStore(session_factory)


@pytest.fixture()
def events() -> list[str]:
    return []


@pytest.fixture()
def cache(events: list[str]) -> RecordingCache:
    return RecordingCache(events)


@pytest.fixture()
def actions(test_settings: Settings, store: SqlRecordStore, cache: RecordingCache) -> InvoiceActions:
    return InvoiceActions(test_settings, store, cache)


@pytest.fixture()
def customer_id(store: SqlRecordStore) -> str:
    return store.insert(CUSTOMERS, {"name": "Delba de Oliveira", "email": "delba@oliveira.com"})
