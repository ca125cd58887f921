from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


@dataclass(frozen=True, slots=True)
class DashboardColumns:
    """Logical field -> header text expected in the daily dashboard export."""

    policy_number: str = "Policy Number"
    status: str = "Policy Status"
    first_arrear: str = "Due Date of 1st Arrear"
    second_arrear: str = "Due Date of 2nd Arrear"
    third_arrear: str = "Due Date of 3rd Arrear"
    cancellation_reason: str = "Cancellation Reason"
    current_gross_premium: str = "Current Gross Premium Per Frequency"
    next_premium_collection_date: str = "Max. Next Premium Collection Date"
    starting_date: str = "Starting Date"
    number_of_paid_premiums: str = "Number Of Paid Premiums"

    def arrears(self) -> tuple[str, str, str]:
        return (self.first_arrear, self.second_arrear, self.third_arrear)

    def mandatory(self) -> tuple[str, ...]:
        return (self.policy_number, self.status, *self.arrears())

    def consumed(self) -> tuple[str, ...]:
        return (
            *self.mandatory(),
            self.cancellation_reason,
            self.current_gross_premium,
            self.next_premium_collection_date,
            self.starting_date,
            self.number_of_paid_premiums,
        )


DEFAULT_COLUMNS = DashboardColumns()


@dataclass(frozen=True, slots=True)
class PolicyRecord:
    policy_number: str
    status: str = "UNKNOWN"
    missed_payments: tuple[str, ...] = ()
    cancellation_reason: str | None = None
    current_gross_premium_per_frequency: str | None = None
    max_next_premium_collection_date: str | None = None
    starting_date: str | None = None
    number_of_paid_premiums: str | None = None
    potential_cancellation_date: str | None = None
    extra: Mapping[str, str] = field(default_factory=dict)
    source_row: Mapping[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "policy_number": self.policy_number,
            "status": self.status,
            "missed_payments": list(self.missed_payments),
            "cancellation_reason": self.cancellation_reason,
            "current_gross_premium_per_frequency": self.current_gross_premium_per_frequency,
            "max_next_premium_collection_date": self.max_next_premium_collection_date,
            "starting_date": self.starting_date,
            "number_of_paid_premiums": self.number_of_paid_premiums,
            "potential_cancellation_date": self.potential_cancellation_date,
        }
        for header, value in self.extra.items():
            payload.setdefault(header, value)
        return payload


ClearedBatchSet = frozenset[str]


class ReconciliationOutcome(str, Enum):
    MATCHED = "matched"
    EMPTY_BATCH = "empty_batch"
    NO_DASHBOARD_MATCHES = "no_dashboard_matches"
    NONE_CLEARED = "none_cleared"


OUTCOME_MESSAGES: dict[ReconciliationOutcome, str] = {
    ReconciliationOutcome.MATCHED: "{count} matching and cleared policies found.",
    ReconciliationOutcome.EMPTY_BATCH: (
        "The cleared batch file is empty or contains no policy numbers."
    ),
    ReconciliationOutcome.NO_DASHBOARD_MATCHES: (
        "No policies from the dashboard matched the cleared batch."
    ),
    ReconciliationOutcome.NONE_CLEARED: (
        "Policies matched the cleared batch but none met the 'next payment cleared' criteria."
    ),
}


@dataclass(slots=True)
class ReconciliationResult:
    outcome: ReconciliationOutcome
    records: list[PolicyRecord] = field(default_factory=list)
    headers: list[str] = field(default_factory=list)
    batch_size: int = 0
    dashboard_matches: int = 0

    @property
    def count(self) -> int:
        return len(self.records)

    @property
    def message(self) -> str:
        return OUTCOME_MESSAGES[self.outcome].format(count=self.count)

    def to_dict(self) -> dict[str, Any]:
        return {
            "outcome": self.outcome.value,
            "message": self.message,
            "count": self.count,
            "batch_size": self.batch_size,
            "dashboard_matches": self.dashboard_matches,
            "records": [record.to_dict() for record in self.records],
        }


@dataclass(frozen=True, slots=True)
class ReportFile:
    filename: str
    media_type: str
    content: str
