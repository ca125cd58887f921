from __future__ import annotations

import logging
from collections.abc import Iterable

from .config import Settings
from .extractor import extract_policy_records
from .schemas import DEFAULT_COLUMNS, DashboardColumns, PolicyRecord
from .tables import read_table

logger = logging.getLogger(__name__)


class PolicyIndex:
    """Policy number -> record for one dashboard upload."""

    def __init__(self, records: Iterable[PolicyRecord]) -> None:
        self._records: dict[str, PolicyRecord] = {}
        for record in records:
            # Later rows win, as in a re-exported dashboard.
            self._records[record.policy_number] = record

    @classmethod
    def from_dashboard(
        cls,
        text: str,
        columns: DashboardColumns = DEFAULT_COLUMNS,
        settings: Settings | None = None,
    ) -> PolicyIndex:
        settings = settings or Settings()
        table = read_table(text, has_header=True)
        records = extract_policy_records(
            table, columns=columns, cancellation_window_days=settings.cancellation_window_days
        )
        index = cls(records)
        logger.info("Indexed %d policies", len(index))
        return index

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, policy_number: object) -> bool:
        return isinstance(policy_number, str) and policy_number.strip() in self._records

    def find(self, policy_number: str | None) -> PolicyRecord | None:
        query = (policy_number or "").strip()
        if not query:
            return None
        return self._records.get(query)
