from __future__ import annotations

from enum import Enum

LAPSED_STATUSES = frozenset({"LAPSED", "TEMPORARILY_LAPSED", "PERMANENTLY_LAPSED"})
CANCELLED_STATUSES = frozenset({"CANCELLED"})
# Exports are inconsistent about the separator.
ON_RISK_STATUSES = frozenset({"ON_RISK", "ON RISK"})


class StatusCategory(str, Enum):
    LAPSED = "lapsed"
    ON_RISK = "on_risk"
    CANCELLED = "cancelled"
    UNKNOWN = "unknown"


def _normalize(status: str | None) -> str:
    return (status or "").strip().upper()


def is_lapsed_status(status: str | None) -> bool:
    return _normalize(status) in LAPSED_STATUSES


def is_cancelled_status(status: str | None) -> bool:
    return _normalize(status) in CANCELLED_STATUSES


def is_on_risk_status(status: str | None) -> bool:
    return _normalize(status) in ON_RISK_STATUSES


def classify_status(status: str | None) -> StatusCategory:
    if is_lapsed_status(status):
        return StatusCategory.LAPSED
    if is_on_risk_status(status):
        return StatusCategory.ON_RISK
    if is_cancelled_status(status):
        return StatusCategory.CANCELLED
    return StatusCategory.UNKNOWN
