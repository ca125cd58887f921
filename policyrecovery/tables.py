from __future__ import annotations

import io
import logging
import re
import warnings
from dataclasses import dataclass, field

import pandas as pd

from .errors import CsvParseError, EmptyFileError

logger = logging.getLogger(__name__)

_LINE_RE = re.compile(r"\b(?:line|row)\s+(\d+)", re.I)

DELIMITER_CANDIDATES = (",", "\t", "|", ";")


@dataclass(slots=True)
class Table:
    headers: list[str]
    rows: list[dict[str, str]] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.rows)

    def has_column(self, header: str) -> bool:
        return header in self.headers


def _row_from_parser_message(message: str) -> int | None:
    match = _LINE_RE.search(message)
    return int(match.group(1)) if match else None


def _first_line(text: str) -> str:
    return next((line for line in text.splitlines() if line.strip()), "")


def guess_delimiter(text: str) -> str:
    """Most frequent candidate delimiter on the first non-blank line, comma on a tie."""
    first_line = _first_line(text)
    counts = {delim: first_line.count(delim) for delim in DELIMITER_CANDIDATES}
    best = max(DELIMITER_CANDIDATES, key=lambda delim: counts[delim])
    return best if counts[best] > counts[","] else ","


def _read_csv(text: str, delimiter: str, **kwargs) -> pd.DataFrame:
    try:
        with warnings.catch_warnings():
            # Rows wider than the header (trailing delimiters) are cut back to the header width.
            warnings.simplefilter("ignore", pd.errors.ParserWarning)
            return pd.read_csv(
                io.StringIO(text),
                sep=delimiter,
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=True,
                index_col=False,
                **kwargs,
            )
    except pd.errors.EmptyDataError as exc:
        raise EmptyFileError() from exc
    except pd.errors.ParserError as exc:
        message = str(exc).strip()
        logger.warning("CSV parsing failed: %s", message)
        raise CsvParseError(_row_from_parser_message(message), message) from exc


def read_table(text: str, has_header: bool = True) -> Table:
    """Parse delimited text into string cells, keeping column order.

    No numeric or date coercion happens here; dashboard dates are day-first
    and are handled by :mod:`policyrecovery.dates`. Header text is kept
    exactly as exported (trimmed), including duplicate and empty headers.
    """
    text = text.lstrip("\ufeff")
    if not text.strip():
        raise EmptyFileError()

    delimiter = guess_delimiter(text)
    if delimiter != ",":
        logger.debug("Detected %r as the CSV delimiter", delimiter)

    if has_header:
        # header=None leaves the header cells untouched; pandas would rename
        # duplicates to "X.1" and empty cells to "Unnamed: n".
        header_row = _read_csv(_first_line(text), delimiter, header=None)
        headers = [str(value).strip() for value in header_row.iloc[0].fillna("")]
        df = _read_csv(text, delimiter, header=0)
    else:
        df = _read_csv(text, delimiter, header=None)
        headers = [f"Column {idx + 1}" for idx in range(len(df.columns))]

    df = df.iloc[:, : len(headers)].fillna("")
    if df.empty:
        raise EmptyFileError()

    rows: list[dict[str, str]] = []
    for values in df.itertuples(index=False, name=None):
        row: dict[str, str] = {}
        for header, value in zip(headers, values):
            # A repeated header keeps its first column's cell.
            row.setdefault(header, str(value))
        rows.append(row)

    logger.debug("Read %d rows across %d columns", len(rows), len(headers))
    return Table(headers=headers, rows=rows)
