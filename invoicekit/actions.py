from collections.abc import Callable, Mapping
import logging
from typing import Any

from invoicekit.cache import ViewCache
from invoicekit.config import Settings
from invoicekit.forms import CREATE_INVOICE, UPDATE_INVOICE, extract_fields, validate_fields
from invoicekit.schemas import (
    FieldErrors,
    InfrastructureFailure,
    MutationRequest,
    MutationResult,
    NotFound,
    Success,
    ValidationFailure,
)
from invoicekit.store import INVOICES, RecordNotFoundError, RecordStore
from invoicekit.transform import build_invoice_changes, build_new_invoice


logger = logging.getLogger(__name__)

VERBS = {"create": "Create", "update": "Update", "delete": "Delete"}


class InvoiceActions:
    """Create, update and delete invoices from submitted form data.

    Every action runs extract, validate, transform and persist in order
    and returns a ``MutationResult`` instead of raising. The store and the
    view cache are owned by the caller.
    """

    def __init__(self, settings: Settings, store: RecordStore, cache: ViewCache) -> None:
        self.settings = settings
        self.store = store
        self.cache = cache

    def create_invoice(self, form: Mapping[str, Any]) -> MutationResult:
        request = MutationRequest(fields=form)
        outcome = validate_fields(CREATE_INVOICE, extract_fields(request.fields, CREATE_INVOICE.field_names))
        if isinstance(outcome, FieldErrors):
            return ValidationFailure(errors=outcome.errors, message="Missing Fields. Failed to Create Invoice.")

        record = build_new_invoice(outcome)
        return self._persist(
            "create",
            lambda: self.store.insert(INVOICES, record.as_row()),
            record_id=record.id,
            navigate=True,
        )

    def update_invoice(self, invoice_id: str, form: Mapping[str, Any]) -> MutationResult:
        request = MutationRequest(fields=form, context={"id": invoice_id})
        outcome = validate_fields(UPDATE_INVOICE, extract_fields(request.fields, UPDATE_INVOICE.field_names))
        if isinstance(outcome, FieldErrors):
            return ValidationFailure(errors=outcome.errors, message="Missing Fields. Failed to Update Invoice.")

        target = request.context["id"]
        changes = build_invoice_changes(outcome)
        return self._persist(
            "update",
            lambda: self.store.update(INVOICES, target, changes),
            record_id=target,
            navigate=True,
        )

    def delete_invoice(self, invoice_id: str) -> MutationResult:
        request = MutationRequest(fields={}, context={"id": invoice_id})
        target = request.context["id"]
        # Already on the listing, so no navigation.
        return self._persist(
            "delete",
            lambda: self.store.delete(INVOICES, target),
            record_id=target,
            navigate=False,
        )

    def _persist(self, operation: str, write: Callable[[], object], *, record_id: str, navigate: bool) -> MutationResult:
        verb = VERBS[operation]
        try:
            write()
        except RecordNotFoundError:
            logger.warning("invoice not found", extra={"operation": operation, "invoice_id": record_id})
            return NotFound(message="Invoice not found.")
        except Exception:
            logger.exception("invoice write failed", extra={"operation": operation, "invoice_id": record_id})
            return InfrastructureFailure(message=f"Database Error: Failed to {verb} Invoice.")

        # Success side effects stay outside the try so nothing they raise is
        # reported as a failed write.
        self.cache.invalidate(self.settings.invoices_view)
        logger.info("invoice %sd", operation, extra={"operation": operation, "invoice_id": record_id})
        return Success(redirect_to=self.settings.invoices_view if navigate else None)
