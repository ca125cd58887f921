from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from typing import Any, Literal

import pandas as pd

from .schemas import DEFAULT_COLUMNS, DashboardColumns, PolicyRecord, ReconciliationResult, ReportFile

ReportFormat = Literal["csv", "txt"]

_TRAILING_DIGITS_RE = re.compile(r"\d+$")

REPORT_TITLE = "Next Cleared Batch Report"
TITLE_RULE = "=" * 37
BLOCK_DIVIDER = "-" * 37
MISSING_VALUE = "N/A"

MEDIA_TYPES: dict[str, str] = {
    "csv": "text/csv",
    "txt": "text/plain",
}


def policy_number_sort_key(policy_number: str) -> int:
    match = _TRAILING_DIGITS_RE.search(policy_number.strip())
    return int(match.group(0)) if match else 0


def sort_records(records: Iterable[PolicyRecord]) -> list[PolicyRecord]:
    return sorted(records, key=lambda record: policy_number_sort_key(record.policy_number))


def _cell_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return "; ".join(str(item) for item in value)
    return str(value)


def render_csv(records: Sequence[PolicyRecord], headers: Sequence[str] | None = None) -> str:
    if headers:
        columns = list(headers)
        rows = [[_cell_text(record.source_row.get(h)) for h in columns] for record in records]
    else:
        payloads = [record.to_dict() for record in records]
        columns = list(payloads[0]) if payloads else []
        rows = [[_cell_text(payload.get(h)) for h in columns] for payload in payloads]

    frame = pd.DataFrame(rows, columns=columns, dtype=str)
    return frame.to_csv(index=False, lineterminator="\n")


def _text_fields(
    record: PolicyRecord, columns: DashboardColumns
) -> list[tuple[str, str | None]]:
    missed = ", ".join(record.missed_payments) if record.missed_payments else "None"
    return [
        (columns.policy_number, record.policy_number),
        (columns.status, record.status),
        ("Missed Payments", missed),
        (columns.next_premium_collection_date, record.max_next_premium_collection_date),
        (columns.current_gross_premium, record.current_gross_premium_per_frequency),
    ]


def render_text(
    records: Sequence[PolicyRecord],
    excluded_columns: Iterable[str] = (),
    title: str = REPORT_TITLE,
    columns: DashboardColumns = DEFAULT_COLUMNS,
) -> str:
    excluded = set(excluded_columns)
    lines = [title, TITLE_RULE, ""]
    for index, record in enumerate(records, start=1):
        lines.append(f"Policy #{index}")
        lines.append(BLOCK_DIVIDER)
        for label, value in _text_fields(record, columns):
            if label in excluded:
                continue
            lines.append(f"{label}: {value if value else MISSING_VALUE}")
        lines.append("")
    return "\n".join(lines)


def report_filename(purpose: str, fmt: ReportFormat) -> str:
    return f"{purpose}_results.{fmt}"


def build_report_file(
    result: ReconciliationResult,
    fmt: ReportFormat,
    purpose: str = "next_cleared_batch",
    excluded_columns: Iterable[str] = (),
) -> ReportFile:
    if fmt == "csv":
        content = render_csv(result.records, result.headers)
    elif fmt == "txt":
        content = render_text(result.records, excluded_columns=excluded_columns)
    else:
        raise ValueError(f"Unsupported report format: {fmt}")
    return ReportFile(
        filename=report_filename(purpose, fmt),
        media_type=MEDIA_TYPES[fmt],
        content=content,
    )
