from collections.abc import Callable
from datetime import UTC, date, datetime
from decimal import ROUND_DOWN, Decimal

from invoicekit.db_models import new_id
from invoicekit.schemas import StoredRecord, ValidatedRecord


def to_minor_units(amount: Decimal | float) -> int:
    # Floats go through their shortest decimal repr so 49.99 becomes 4999, not 4998.
    cents = Decimal(str(amount)) * 100
    return int(cents.to_integral_value(rounding=ROUND_DOWN))


def from_minor_units(cents: int) -> float:
    return cents / 100


def format_currency(cents: int) -> str:
    sign = "-" if cents < 0 else ""
    dollars, remainder = divmod(abs(cents), 100)
    return f"{sign}${dollars:,}.{remainder:02d}"


def utc_today() -> date:
    return datetime.now(UTC).date()


def date_stamp(today: date) -> str:
    return today.strftime("%Y-%m-%d")


def build_new_invoice(
    validated: ValidatedRecord,
    *,
    id_factory: Callable[[], str] = new_id,
    today: Callable[[], date] = utc_today,
) -> StoredRecord:
    values = validated.values
    return StoredRecord(
        id=id_factory(),
        customer_id=str(values["customerId"]),
        amount=to_minor_units(values["amount"]),
        status=str(values["status"]),
        date=date_stamp(today()),
    )


def build_invoice_changes(validated: ValidatedRecord) -> dict[str, object]:
    """Column values for an update; the date and id are never touched."""
    values = validated.values
    changes: dict[str, object] = {}
    if values.get("customerId") is not None:
        changes["customer_id"] = str(values["customerId"])
    if values.get("amount") is not None:
        changes["amount"] = to_minor_units(values["amount"])
    if values.get("status") is not None:
        changes["status"] = str(values["status"])
    return changes
