from collections.abc import Mapping
from dataclasses import dataclass, field


@dataclass(frozen=True)
class MutationRequest:
    fields: Mapping[str, object]
    # Bound by the caller (e.g. the invoice id from the route), never read from the form.
    context: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ValidatedRecord:
    values: dict[str, object]


@dataclass(frozen=True)
class FieldErrors:
    errors: dict[str, list[str]]

    def __post_init__(self) -> None:
        if not self.errors or not all(self.errors.values()):
            raise ValueError("FieldErrors requires at least one message per failing field")


ValidationOutcome = ValidatedRecord | FieldErrors


@dataclass(frozen=True)
class StoredRecord:
    id: str
    customer_id: str
    amount: int
    status: str
    date: str

    def as_row(self) -> dict[str, object]:
        return {
            "id": self.id,
            "customer_id": self.customer_id,
            "amount": self.amount,
            "status": self.status,
            "date": self.date,
        }


@dataclass(frozen=True)
class Success:
    redirect_to: str | None = None

    ok = True
    status = "succeeded"


@dataclass(frozen=True)
class ValidationFailure:
    errors: dict[str, list[str]]
    message: str

    ok = False
    status = "invalid"


@dataclass(frozen=True)
class InfrastructureFailure:
    message: str

    ok = False
    status = "failed"


@dataclass(frozen=True)
class NotFound:
    message: str

    ok = False
    status = "not_found"


MutationResult = Success | ValidationFailure | InfrastructureFailure | NotFound
