"""Day-first dashboard dates (``DD/MM/YYYY`` with an optional time suffix)."""

from __future__ import annotations

import logging
from datetime import date, timedelta

logger = logging.getLogger(__name__)

MIN_YEAR = 1900
MAX_YEAR = 2100


def strip_time(value: str) -> str:
    """Keep only the text before the first space (``01/02/2024 00:00:00`` -> ``01/02/2024``)."""
    return value.strip().split(" ")[0]


def parse_dashboard_date(value: str | None) -> date | None:
    if not value or not value.strip():
        return None

    parts = strip_time(value).split("/")
    if len(parts) != 3 or not all(part.isascii() and part.isdigit() for part in parts):
        logger.warning("Could not parse date string: %r", value)
        return None

    day, month, year = (int(part) for part in parts)
    if not (1 <= day <= 31 and 1 <= month <= 12 and MIN_YEAR <= year <= MAX_YEAR):
        logger.warning(
            "Parsed date components seem invalid: day=%s month=%s year=%s from %r",
            day,
            month,
            year,
            value,
        )
        return None

    try:
        return date(year, month, day)
    except ValueError:
        # 31/02 and friends: the components are in range but the day does not exist
        logger.warning("Invalid date components: %r", value)
        return None


def format_dashboard_date(value: date) -> str:
    return value.strftime("%d/%m/%Y")


def add_days(value: date, days: int) -> date:
    return value + timedelta(days=days)


def add_months(value: date, months: int) -> date:
    """Same day-of-month ``months`` later.

    A day that does not exist in the target month spills over into the next
    one (31/01 + 1 month -> 02/03 or 03/03), matching how the collection
    schedule rolls month ends.
    """
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    return date(year, month, 1) + timedelta(days=value.day - 1)
