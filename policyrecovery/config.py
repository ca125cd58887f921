from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_EXCLUDED_COLUMNS: tuple[str, ...] = (
    "Distribution Partner",
    "Product Name",
    "Sales Channel",
    "Broker ID",
    "Sold Date",
    "Exit Date",
    "Cancellation Type",
    "Policy Type",
    "LOAP Consent",
    "Premium Escalation Type",
    "Benefit Escalation Type",
    "Current Sum Sumassured",
    "Current Gross Premium Annualized",
    "Premium Frequency",
    "Blank",
    "Number Of Paid Premiums",
    "Number Of Unpaid Premiums",
    "Value Of Premiums Collected",
)


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value.strip())
    except ValueError:
        return default


def _env_list(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    value = os.getenv(name)
    if value is None:
        return default
    return tuple(item.strip() for item in value.split(",") if item.strip())


@dataclass(slots=True)
class Settings:
    excluded_report_columns: tuple[str, ...] = DEFAULT_EXCLUDED_COLUMNS
    cleared_batch_policy_column: str = "Policy Number"
    recovery_grace_days: int = 5
    cancellation_window_days: int = 30
    report_purpose: str = "next_cleared_batch"
    log_level: str = "INFO"


def load_settings() -> Settings:
    return Settings(
        excluded_report_columns=_env_list("REPORT_EXCLUDED_COLUMNS", DEFAULT_EXCLUDED_COLUMNS),
        cleared_batch_policy_column=os.getenv("CLEARED_BATCH_POLICY_COLUMN", "Policy Number"),
        recovery_grace_days=_env_int("RECOVERY_GRACE_DAYS", 5),
        cancellation_window_days=_env_int("CANCELLATION_WINDOW_DAYS", 30),
        report_purpose=os.getenv("REPORT_PURPOSE", "next_cleared_batch"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
