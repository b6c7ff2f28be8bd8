import logging
from typing import Protocol

from sqlalchemy import delete, update
from sqlalchemy.orm import Session, sessionmaker

from invoicekit.db_models import Base, Customer, Invoice


logger = logging.getLogger(__name__)

INVOICES = "invoices"
CUSTOMERS = "customers"


class StoreError(RuntimeError):
    pass


class UnknownCollectionError(StoreError):
    pass


class RecordNotFoundError(StoreError):
    def __init__(self, collection: str, identifier: str) -> None:
        super().__init__(f"{collection} record {identifier} not found")
        self.collection = collection
        self.identifier = identifier


class RecordStore(Protocol):
    def insert(self, collection: str, record: dict[str, object]) -> str: ...

    def update(self, collection: str, identifier: str, partial: dict[str, object]) -> None: ...

    def delete(self, collection: str, identifier: str) -> None: ...


class SqlRecordStore:
    """Write side of the database, one session per call."""

    models: dict[str, type[Base]] = {INVOICES: Invoice, CUSTOMERS: Customer}

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self.session_factory = session_factory

    def _model(self, collection: str) -> type[Base]:
        try:
            return self.models[collection]
        except KeyError:
            raise UnknownCollectionError(f"unknown collection: {collection}") from None

    def insert(self, collection: str, record: dict[str, object]) -> str:
        model = self._model(collection)
        with self.session_factory() as db:
            row = model(**record)
            db.add(row)
            db.commit()
            identifier = str(row.id)
        logger.debug("record inserted", extra={"collection": collection, "record_id": identifier})
        return identifier

    def update(self, collection: str, identifier: str, partial: dict[str, object]) -> None:
        model = self._model(collection)
        with self.session_factory() as db:
            stmt = update(model).where(model.id == identifier).values(**partial)
            matched = db.execute(stmt).rowcount
            if not matched:
                db.rollback()
                raise RecordNotFoundError(collection, identifier)
            db.commit()

    def delete(self, collection: str, identifier: str) -> None:
        model = self._model(collection)
        with self.session_factory() as db:
            matched = db.execute(delete(model).where(model.id == identifier)).rowcount
            if not matched:
                db.rollback()
                raise RecordNotFoundError(collection, identifier)
            db.commit()
