from __future__ import annotations

from collections.abc import Sequence


class DashboardError(ValueError):
    """File-level structural problem; the run is aborted before any row is processed."""


class CsvParseError(DashboardError):
    def __init__(self, row: int | None, message: str) -> None:
        self.row = row
        self.message = message
        location = f" on row {row}" if row is not None else ""
        super().__init__(f"Error parsing CSV{location}: {message}")


class EmptyFileError(DashboardError):
    def __init__(self, message: str = "CSV file is empty or has no data rows.") -> None:
        super().__init__(message)


class MissingColumnsError(DashboardError):
    def __init__(self, missing: Sequence[str], expected: Sequence[str]) -> None:
        self.missing = list(missing)
        self.expected = list(expected)
        expected_text = ", ".join(f"'{col}'" for col in self.expected)
        super().__init__(
            f"Missing required columns in CSV: {', '.join(self.missing)}. "
            f"Please ensure the CSV has headers: {expected_text}."
        )
