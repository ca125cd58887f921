from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from .dates import add_days, format_dashboard_date, parse_dashboard_date, strip_time
from .errors import MissingColumnsError
from .schemas import DEFAULT_COLUMNS, DashboardColumns, PolicyRecord
from .status import is_on_risk_status
from .tables import Table

logger = logging.getLogger(__name__)

DEFAULT_CANCELLATION_WINDOW_DAYS = 30


def validate_dashboard_headers(
    headers: Sequence[str],
    columns: DashboardColumns = DEFAULT_COLUMNS,
) -> None:
    mandatory = columns.mandatory()
    missing = [col for col in mandatory if col not in headers]
    if missing:
        raise MissingColumnsError(missing=missing, expected=mandatory)


def _cell(row: Mapping[str, str], header: str) -> str:
    value = row.get(header)
    if value is None:
        return ""
    return str(value).strip()


def _optional(
    row: Mapping[str, str],
    headers: Sequence[str],
    header: str,
    date_bearing: bool = False,
) -> str | None:
    if header not in headers:
        return None
    value = _cell(row, header)
    if not value:
        return None
    return strip_time(value) if date_bearing else value


def potential_cancellation_date(
    status: str,
    missed_payments: Sequence[str],
    window_days: int = DEFAULT_CANCELLATION_WINDOW_DAYS,
) -> str | None:
    """On-risk policy with all three arrears outstanding: third arrear + ``window_days``."""
    if not is_on_risk_status(status) or len(missed_payments) != 3:
        return None
    third_arrear = parse_dashboard_date(missed_payments[2])
    if third_arrear is None:
        return None
    return format_dashboard_date(add_days(third_arrear, window_days))


def extract_policy_record(
    row: Mapping[str, str],
    headers: Sequence[str],
    columns: DashboardColumns = DEFAULT_COLUMNS,
    cancellation_window_days: int = DEFAULT_CANCELLATION_WINDOW_DAYS,
) -> PolicyRecord | None:
    policy_number = _cell(row, columns.policy_number)
    if not policy_number:
        return None

    status = _cell(row, columns.status) or "UNKNOWN"
    missed_payments = tuple(
        value for value in (_cell(row, header) for header in columns.arrears()) if value
    )

    consumed = set(columns.consumed())
    extra = {
        header: "" if row.get(header) is None else str(row[header])
        for header in headers
        if header not in consumed
    }

    return PolicyRecord(
        policy_number=policy_number,
        status=status,
        missed_payments=missed_payments,
        cancellation_reason=_optional(row, headers, columns.cancellation_reason),
        current_gross_premium_per_frequency=_optional(row, headers, columns.current_gross_premium),
        max_next_premium_collection_date=_optional(
            row, headers, columns.next_premium_collection_date, date_bearing=True
        ),
        starting_date=_optional(row, headers, columns.starting_date, date_bearing=True),
        number_of_paid_premiums=_optional(row, headers, columns.number_of_paid_premiums),
        potential_cancellation_date=potential_cancellation_date(
            status, missed_payments, cancellation_window_days
        ),
        extra=extra,
        source_row={header: str(row.get(header, "")) for header in headers},
    )


def extract_policy_records(
    table: Table,
    columns: DashboardColumns = DEFAULT_COLUMNS,
    cancellation_window_days: int = DEFAULT_CANCELLATION_WINDOW_DAYS,
) -> list[PolicyRecord]:
    validate_dashboard_headers(table.headers, columns)

    records: list[PolicyRecord] = []
    skipped = 0
    for row in table.rows:
        record = extract_policy_record(row, table.headers, columns, cancellation_window_days)
        if record is None:
            skipped += 1
            continue
        records.append(record)

    if skipped:
        logger.debug("Skipped %d dashboard rows without a policy number", skipped)
    logger.info("Extracted %d policy records", len(records))
    return records
