import logging

from sqlalchemy import select
from sqlalchemy.orm import Session, sessionmaker

from invoicekit.cache import ViewCache
from invoicekit.db_models import Customer, Invoice


logger = logging.getLogger(__name__)


class InvoiceListing:
    """Read side for the invoices page, cached under the view path."""

    def __init__(self, session_factory: sessionmaker[Session], cache: ViewCache, view: str) -> None:
        self.session_factory = session_factory
        self.cache = cache
        self.view = view

    def fetch(self) -> list[dict[str, object]]:
        cached = self.cache.get(self.view)
        if cached is not None:
            return [dict(row) for row in cached]

        stmt = (
            select(Invoice, Customer.name, Customer.email)
            .outerjoin(Customer, Invoice.customer_id == Customer.id)
            .order_by(Invoice.date.desc(), Invoice.id)
        )
        with self.session_factory() as db:
            rows = [
                {
                    "id": invoice.id,
                    "customer_id": invoice.customer_id,
                    "name": name,
                    "email": email,
                    "amount": invoice.amount,
                    "status": invoice.status,
                    "date": invoice.date,
                }
                for invoice, name, email in db.execute(stmt).all()
            ]

        logger.debug("invoice listing loaded", extra={"view": self.view, "rows": len(rows)})
        # Callers get copies; the cached view stays as loaded.
        self.cache.set(self.view, tuple(dict(row) for row in rows))
        return rows
