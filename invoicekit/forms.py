"""Form extraction and declarative validation.

A ``ValidationSchema`` is a table of ``FieldSpec`` rows. ``validate_fields``
turns the table into a pydantic model once, runs it over the extracted
fields and reshapes every failure into a field error map, so a submission
with several bad fields reports all of them together.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal
from functools import lru_cache
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, create_model

from invoicekit.schemas import FieldErrors, ValidatedRecord, ValidationOutcome


FIELD_KINDS = ("string", "number", "money", "enum")

UPPER_BOUND_ERRORS = ("less_than", "less_than_equal")

# Largest amount whose cents still fit a 32-bit INTEGER column.
MAX_AMOUNT = Decimal("21474836.47")


@dataclass(frozen=True)
class FieldSpec:
    name: str
    kind: str
    required: bool = True
    message: str | None = None
    choices: tuple[str, ...] = ()
    # Exclusive lower and inclusive upper bound for numbers and money.
    gt: Decimal | float | None = None
    le: Decimal | float | None = None
    max_message: str | None = None

    def __post_init__(self) -> None:
        if self.kind not in FIELD_KINDS:
            raise ValueError(f"unknown field kind: {self.kind}")
        if self.kind == "enum" and not self.choices:
            raise ValueError(f"enum field {self.name} needs choices")


@dataclass(frozen=True)
class ValidationSchema:
    name: str
    fields: tuple[FieldSpec, ...]

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(spec.name for spec in self.fields)

    def get(self, name: str) -> FieldSpec | None:
        for spec in self.fields:
            if spec.name == name:
                return spec
        return None

    def omit(self, *names: str) -> "ValidationSchema":
        unknown = set(names) - set(self.field_names)
        if unknown:
            raise KeyError(f"cannot omit unknown fields: {sorted(unknown)}")
        kept = tuple(spec for spec in self.fields if spec.name not in names)
        return ValidationSchema(name=self.name, fields=kept)


INVOICE_FORM = ValidationSchema(
    name="Invoice",
    fields=(
        FieldSpec("id", "string"),
        FieldSpec("customerId", "string", message="Please select a customer."),
        FieldSpec(
            "amount",
            "money",
            gt=0,
            le=MAX_AMOUNT,
            message="Please enter an amount greater than $0.",
            max_message="Please enter an amount no greater than $21,474,836.47.",
        ),
        FieldSpec("status", "enum", choices=("pending", "paid"), message="Please select an invoice status."),
        FieldSpec("date", "string"),
    ),
)

# id and date are generated by the system, never submitted.
CREATE_INVOICE = INVOICE_FORM.omit("id", "date")
UPDATE_INVOICE = INVOICE_FORM.omit("id", "date")


def extract_fields(payload: Mapping[str, Any], names: tuple[str, ...]) -> dict[str, str | None]:
    extracted: dict[str, str | None] = {}
    for name in names:
        value = payload.get(name)
        extracted[name] = None if value is None else str(value)
    return extracted


def _as_decimal(bound: Decimal | float | None) -> Decimal | None:
    return None if bound is None else Decimal(str(bound))


def _annotation(spec: FieldSpec) -> Any:
    if spec.kind == "string":
        annotation: Any = Annotated[str, Field(min_length=1)]
    elif spec.kind == "number":
        annotation = Annotated[float, Field(gt=spec.gt, le=spec.le, allow_inf_nan=False)]
    elif spec.kind == "money":
        # Whole cents only, so the stored amount never rounds away from what was checked.
        annotation = Annotated[
            Decimal,
            Field(gt=_as_decimal(spec.gt), le=_as_decimal(spec.le), decimal_places=2, allow_inf_nan=False),
        ]
    else:
        annotation = Literal[spec.choices]
    if not spec.required:
        return annotation | None
    return annotation


@lru_cache(maxsize=None)
def _model_for(schema: ValidationSchema) -> type[BaseModel]:
    definitions: dict[str, Any] = {}
    for spec in schema.fields:
        default = ... if spec.required else None
        definitions[spec.name] = (_annotation(spec), default)
    return create_model(
        f"{schema.name}Form",
        __config__=ConfigDict(extra="ignore"),
        **definitions,
    )


def _clean(schema: ValidationSchema, fields: Mapping[str, str | None]) -> dict[str, str | None]:
    # Every kind is stripped the same way; optional fields submitted empty count as absent.
    cleaned = {name: value.strip() if isinstance(value, str) else value for name, value in fields.items()}
    for spec in schema.fields:
        if not spec.required and cleaned.get(spec.name) == "":
            cleaned[spec.name] = None
    return cleaned


def _message(spec: FieldSpec | None, error_type: str, fallback: str) -> str:
    if spec is None:
        return fallback
    if error_type in UPPER_BOUND_ERRORS and spec.max_message:
        return spec.max_message
    return spec.message or fallback


def validate_fields(schema: ValidationSchema, fields: Mapping[str, str | None]) -> ValidationOutcome:
    model = _model_for(schema)
    try:
        parsed = model.model_validate(_clean(schema, fields))
    except ValidationError as exc:
        errors: dict[str, list[str]] = {}
        for error in exc.errors():
            name = str(error["loc"][0]) if error["loc"] else "__root__"
            spec = schema.get(name)
            message = _message(spec, error["type"], error["msg"])
            messages = errors.setdefault(name, [])
            if message not in messages:
                messages.append(message)
        return FieldErrors(errors=errors)

    return ValidatedRecord(values=parsed.model_dump())
