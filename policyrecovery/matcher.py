from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from datetime import UTC, date, datetime

from .config import Settings
from .errors import EmptyFileError
from .extractor import extract_policy_records
from .inference import DEFAULT_GRACE_DAYS, check_next_payment_cleared
from .report import sort_records
from .schemas import (
    DEFAULT_COLUMNS,
    ClearedBatchSet,
    DashboardColumns,
    PolicyRecord,
    ReconciliationOutcome,
    ReconciliationResult,
)
from .tables import read_table

logger = logging.getLogger(__name__)

_NEWLINE_RE = re.compile(r"\r?\n")


def is_csv_filename(filename: str | None) -> bool:
    return bool(filename) and filename.strip().lower().endswith(".csv")


def today_utc() -> date:
    return datetime.now(UTC).date()


def parse_cleared_batch(
    text: str,
    is_csv: bool,
    policy_column: str = DEFAULT_COLUMNS.policy_number,
) -> ClearedBatchSet:
    """Policy numbers from a cleared-batch upload (CSV with a policy column, or one per line)."""
    if not is_csv:
        return frozenset(line.strip() for line in _NEWLINE_RE.split(text) if line.strip())

    try:
        table = read_table(text, has_header=True)
    except EmptyFileError:
        return frozenset()

    column = policy_column if table.has_column(policy_column) else table.headers[0]
    if column != policy_column:
        logger.info("Cleared batch has no %r column, using %r", policy_column, column)
    return frozenset(row[column].strip() for row in table.rows if row.get(column, "").strip())


def match_cleared_batch(
    records: Iterable[PolicyRecord],
    batch: ClearedBatchSet,
    as_of: date,
    grace_days: int = DEFAULT_GRACE_DAYS,
) -> tuple[list[PolicyRecord], list[PolicyRecord]]:
    """Return ``(in_batch, cleared)``; ``cleared`` is the subset passing the inference."""
    in_batch = [record for record in records if record.policy_number in batch]
    cleared = [
        record for record in in_batch if check_next_payment_cleared(record, as_of, grace_days)
    ]
    return in_batch, cleared


def run_next_cleared_batch(
    dashboard_text: str,
    batch_text: str,
    *,
    batch_is_csv: bool,
    as_of: date | None = None,
    settings: Settings | None = None,
    columns: DashboardColumns = DEFAULT_COLUMNS,
) -> ReconciliationResult:
    settings = settings or Settings()
    current = as_of or today_utc()

    batch = parse_cleared_batch(
        batch_text, is_csv=batch_is_csv, policy_column=settings.cleared_batch_policy_column
    )
    if not batch:
        logger.info("Cleared batch contains no policy numbers")
        return ReconciliationResult(outcome=ReconciliationOutcome.EMPTY_BATCH)

    table = read_table(dashboard_text, has_header=True)
    records = extract_policy_records(
        table, columns=columns, cancellation_window_days=settings.cancellation_window_days
    )
    in_batch, cleared = match_cleared_batch(
        records, batch, as_of=current, grace_days=settings.recovery_grace_days
    )

    if not in_batch:
        outcome = ReconciliationOutcome.NO_DASHBOARD_MATCHES
    elif not cleared:
        outcome = ReconciliationOutcome.NONE_CLEARED
    else:
        outcome = ReconciliationOutcome.MATCHED

    logger.info(
        "Next cleared batch as of %s: batch=%d dashboard_matches=%d cleared=%d",
        current.isoformat(),
        len(batch),
        len(in_batch),
        len(cleared),
    )
    return ReconciliationResult(
        outcome=outcome,
        records=sort_records(cleared),
        headers=list(table.headers),
        batch_size=len(batch),
        dashboard_matches=len(in_batch),
    )
