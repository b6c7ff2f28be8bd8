from decimal import Decimal

import pytest

from invoicekit.forms import CREATE_INVOICE, INVOICE_FORM, UPDATE_INVOICE, FieldSpec, ValidationSchema, extract_fields, validate_fields
from invoicekit.schemas import FieldErrors, ValidatedRecord


def test_extract_keeps_only_expected_fields_and_fills_missing() -> None:
    payload = {"customerId": "c1", "amount": 50, "extra": "ignored"}

    extracted = extract_fields(payload, CREATE_INVOICE.field_names)

    assert extracted == {"customerId": "c1", "amount": "50", "status": None}


def test_create_and_update_schemas_drop_generated_fields() -> None:
    assert CREATE_INVOICE.field_names == ("customerId", "amount", "status")
    assert UPDATE_INVOICE == CREATE_INVOICE
    assert "id" in INVOICE_FORM.field_names


def test_valid_submission_is_coerced() -> None:
    outcome = validate_fields(CREATE_INVOICE, {"customerId": "c1", "amount": "49.99", "status": "paid"})

    assert isinstance(outcome, ValidatedRecord)
    assert outcome.values == {"customerId": "c1", "amount": Decimal("49.99"), "status": "paid"}


def test_empty_customer_reports_only_customer() -> None:
    outcome = validate_fields(CREATE_INVOICE, {"customerId": "", "amount": "50", "status": "pending"})

    assert isinstance(outcome, FieldErrors)
    assert outcome.errors == {"customerId": ["Please select a customer."]}


def test_zero_amount_reports_amount() -> None:
    outcome = validate_fields(CREATE_INVOICE, {"customerId": "c1", "amount": "0", "status": "pending"})

    assert isinstance(outcome, FieldErrors)
    assert outcome.errors == {"amount": ["Please enter an amount greater than $0."]}


@pytest.mark.parametrize("amount", ["abc", "", None, "-5", "nan", "inf"])
def test_bad_amounts_are_rejected(amount) -> None:
    outcome = validate_fields(CREATE_INVOICE, {"customerId": "c1", "amount": amount, "status": "paid"})

    assert isinstance(outcome, FieldErrors)
    assert list(outcome.errors) == ["amount"]


def test_all_invalid_fields_are_reported_together() -> None:
    outcome = validate_fields(CREATE_INVOICE, {"customerId": None, "amount": "zero", "status": "overdue"})

    assert isinstance(outcome, FieldErrors)
    assert set(outcome.errors) == {"customerId", "amount", "status"}
    assert outcome.errors["status"] == ["Please select an invoice status."]


def test_generic_message_used_without_override() -> None:
    schema = ValidationSchema(name="Note", fields=(FieldSpec("title", "string"),))

    outcome = validate_fields(schema, {"title": None})

    assert isinstance(outcome, FieldErrors)
    assert outcome.errors["title"]
    assert outcome.errors["title"][0] != ""


def test_optional_blank_field_validates_to_none() -> None:
    schema = ValidationSchema(
        name="Memo",
        fields=(FieldSpec("title", "string"), FieldSpec("note", "string", required=False)),
    )

    outcome = validate_fields(schema, {"title": "Q3", "note": "  "})

    assert isinstance(outcome, ValidatedRecord)
    assert outcome.values == {"title": "Q3", "note": None}


def test_field_errors_cannot_be_empty() -> None:
    with pytest.raises(ValueError):
        FieldErrors(errors={})


def test_enum_spec_requires_choices() -> None:
    with pytest.raises(ValueError):
        FieldSpec("status", "enum")


def test_omit_rejects_unknown_field() -> None:
    with pytest.raises(KeyError):
        INVOICE_FORM.omit("nope")


@pytest.mark.parametrize("amount", ["0.001", "19.999", "0.0049"])
def test_amounts_finer_than_a_cent_are_rejected(amount: str) -> None:
    outcome = validate_fields(CREATE_INVOICE, {"customerId": "c1", "amount": amount, "status": "paid"})

    assert isinstance(outcome, FieldErrors)
    assert outcome.errors == {"amount": ["Please enter an amount greater than $0."]}


@pytest.mark.parametrize("amount", ["1e300", "21474836.48", "99999999"])
def test_amounts_above_the_column_limit_are_rejected(amount: str) -> None:
    outcome = validate_fields(CREATE_INVOICE, {"customerId": "c1", "amount": amount, "status": "paid"})

    assert isinstance(outcome, FieldErrors)
    assert outcome.errors == {"amount": ["Please enter an amount no greater than $21,474,836.47."]}


def test_largest_amount_is_accepted() -> None:
    outcome = validate_fields(CREATE_INVOICE, {"customerId": "c1", "amount": "21474836.47", "status": "paid"})

    assert isinstance(outcome, ValidatedRecord)
    assert outcome.values["amount"] == Decimal("21474836.47")


def test_every_field_kind_is_stripped() -> None:
    outcome = validate_fields(CREATE_INVOICE, {"customerId": " c1 ", "amount": " 5 ", "status": " paid "})

    assert isinstance(outcome, ValidatedRecord)
    assert outcome.values == {"customerId": "c1", "amount": Decimal("5"), "status": "paid"}


def test_number_kind_honours_upper_bound() -> None:
    schema = ValidationSchema(name="Rating", fields=(FieldSpec("score", "number", gt=0, le=5),))

    assert isinstance(validate_fields(schema, {"score": "4.5"}), ValidatedRecord)
    outcome = validate_fields(schema, {"score": "6"})
    assert isinstance(outcome, FieldErrors)
    assert list(outcome.errors) == ["score"]
