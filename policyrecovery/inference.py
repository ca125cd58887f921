"""Next-payment-cleared inference.

A policy that missed one or two monthly premiums is treated as recovered
when the insurer's next-collection pointer has moved past the premium that
followed the last missed one, and the grace window for that premium to
clear has elapsed. Billing is assumed to be strictly monthly.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from datetime import date
from typing import Any

from .dates import add_days, add_months, parse_dashboard_date
from .schemas import PolicyRecord
from .status import is_lapsed_status

logger = logging.getLogger(__name__)

DEFAULT_GRACE_DAYS = 5
MAX_RECOVERABLE_MISSED = 2


@dataclass(slots=True)
class RecoveryDecision:
    policy_number: str
    cleared: bool
    rule_applied: str
    expected_recovery_date: date | None = None
    grace_boundary: date | None = None

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        for key in ("expected_recovery_date", "grace_boundary"):
            if payload[key] is not None:
                payload[key] = payload[key].isoformat()
        return payload


def evaluate_recovery(
    record: PolicyRecord,
    as_of: date,
    grace_days: int = DEFAULT_GRACE_DAYS,
) -> RecoveryDecision:
    def reject(rule: str, **kwargs: Any) -> RecoveryDecision:
        decision = RecoveryDecision(record.policy_number, False, rule, **kwargs)
        logger.debug("Policy %s not cleared: %s", record.policy_number, rule)
        return decision

    if is_lapsed_status(record.status):
        return reject("lapsed_status")

    missed = record.missed_payments
    if not 0 < len(missed) <= MAX_RECOVERABLE_MISSED:
        return reject("missed_payment_count")

    last_missed = parse_dashboard_date(missed[-1])
    if last_missed is None:
        logger.warning(
            "Could not parse last missed payment %r for policy %s", missed[-1], record.policy_number
        )
        return reject("unparseable_last_missed_payment")

    expected_recovery = add_months(last_missed, 1)
    grace_boundary = add_days(expected_recovery, grace_days)
    dates = {"expected_recovery_date": expected_recovery, "grace_boundary": grace_boundary}

    if not record.max_next_premium_collection_date:
        return reject("missing_next_collection_date", **dates)

    next_collection = parse_dashboard_date(record.max_next_premium_collection_date)
    if next_collection is None:
        logger.warning(
            "Could not parse next premium collection date %r for policy %s",
            record.max_next_premium_collection_date,
            record.policy_number,
        )
        return reject("unparseable_next_collection_date", **dates)

    # Pointer not past the recovery premium: that premium was missed as well.
    if next_collection <= expected_recovery:
        return reject("recovery_payment_not_collected", **dates)

    if as_of < grace_boundary:
        return reject("within_grace_window", **dates)

    return RecoveryDecision(record.policy_number, True, "next_payment_cleared", **dates)


def check_next_payment_cleared(
    record: PolicyRecord,
    as_of: date,
    grace_days: int = DEFAULT_GRACE_DAYS,
) -> bool:
    return evaluate_recovery(record, as_of, grace_days).cleared
