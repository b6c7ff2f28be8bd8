import argparse
import logging

from invoicekit.actions import InvoiceActions
from invoicekit.cache import InMemoryViewCache
from invoicekit.config import get_settings
from invoicekit.database import build_session_factory
from invoicekit.listing import InvoiceListing
from invoicekit.schemas import MutationResult, ValidationFailure
from invoicekit.store import CUSTOMERS, SqlRecordStore
from invoicekit.transform import format_currency


def _add_invoice_fields(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--customer-id", help="Customer the invoice is billed to")
    parser.add_argument("--amount", help="Amount in dollars, e.g. 49.99")
    parser.add_argument("--status", help="pending or paid")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Manage invoices")
    subparsers = parser.add_subparsers(dest="command", required=True)

    create_parser = subparsers.add_parser("create", help="create an invoice")
    _add_invoice_fields(create_parser)

    update_parser = subparsers.add_parser("update", help="update an invoice")
    update_parser.add_argument("invoice_id", help="Invoice to update")
    _add_invoice_fields(update_parser)

    delete_parser = subparsers.add_parser("delete", help="delete an invoice")
    delete_parser.add_argument("invoice_id", help="Invoice to delete")

    subparsers.add_parser("list", help="list invoices, newest first")

    customer_parser = subparsers.add_parser("add-customer", help="add a customer")
    customer_parser.add_argument("--name", required=True)
    customer_parser.add_argument("--email", required=True)

    return parser.parse_args()


def _form(args: argparse.Namespace) -> dict[str, str | None]:
    return {"customerId": args.customer_id, "amount": args.amount, "status": args.status}


def _report(result: MutationResult) -> None:
    print(
        "status={status} message={message} redirect={redirect}".format(
            status=result.status,
            message=getattr(result, "message", ""),
            redirect=getattr(result, "redirect_to", None),
        )
    )
    if isinstance(result, ValidationFailure):
        for field_name, messages in result.errors.items():
            for message in messages:
                print(f"error {field_name}: {message}")


def main() -> None:
    args = parse_args()
    settings = get_settings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    session_factory = build_session_factory(settings.database_url)
    store = SqlRecordStore(session_factory)
    cache = InMemoryViewCache()

    if args.command == "list":
        for row in InvoiceListing(session_factory, cache, settings.invoices_view).fetch():
            print(
                "id={id} date={date} customer={name} amount={amount} status={status}".format(
                    id=row["id"],
                    date=row["date"],
                    name=row["name"],
                    amount=format_currency(row["amount"]),
                    status=row["status"],
                )
            )
        return

    if args.command == "add-customer":
        customer_id = store.insert(CUSTOMERS, {"name": args.name, "email": args.email})
        print(f"customer_id={customer_id}")
        return

    actions = InvoiceActions(settings, store, cache)
    if args.command == "create":
        result = actions.create_invoice(_form(args))
    elif args.command == "update":
        result = actions.update_invoice(args.invoice_id, _form(args))
    else:
        result = actions.delete_invoice(args.invoice_id)

    _report(result)
    if not result.ok:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
