from __future__ import annotations

import pandas as pd
import pytest

DASHBOARD_HEADERS = [
    "Policy Number",
    "Policy Status",
    "Due Date of 1st Arrear",
    "Due Date of 2nd Arrear",
    "Due Date of 3rd Arrear",
    "Cancellation Reason",
    "Current Gross Premium Per Frequency",
    "Max. Next Premium Collection Date",
    "Starting Date",
    "Product Name",
]


def dashboard_csv(rows: list[dict[str, str]], headers: list[str] | None = None) -> str:
    columns = headers or DASHBOARD_HEADERS
    frame = pd.DataFrame([[row.get(h, "") for h in columns] for row in rows], columns=columns)
    return frame.to_csv(index=False, lineterminator="\n")


@pytest.fixture
def dashboard_rows() -> list[dict[str, str]]:
    return [
        {
            "Policy Number": "POL-12",
            "Policy Status": "ON_RISK",
            "Due Date of 1st Arrear": "01/01/2024",
            "Current Gross Premium Per Frequency": "£25.00",
            "Max. Next Premium Collection Date": "05/03/2024 00:00:00",
            "Starting Date": "01/06/2020 00:00:00",
            "Product Name": "Level Term",
        },
        {
            "Policy Number": "POL-2",
            "Policy Status": "On Risk",
            "Due Date of 1st Arrear": "15/12/2023",
            "Due Date of 2nd Arrear": "15/01/2024",
            "Current Gross Premium Per Frequency": "£40.10",
            "Max. Next Premium Collection Date": "15/03/2024",
            "Product Name": "Decreasing Term",
        },
        {
            "Policy Number": "POL-7",
            "Policy Status": "TEMPORARILY_LAPSED",
            "Due Date of 1st Arrear": "01/01/2024",
            "Cancellation Reason": "Non payment",
            "Max. Next Premium Collection Date": "05/03/2024",
        },
        {
            "Policy Number": "POL-9",
            "Policy Status": "ON_RISK",
            "Due Date of 1st Arrear": "10/01/2024",
            "Max. Next Premium Collection Date": "10/02/2024",
        },
        {
            "Policy Number": "POL-30",
            "Policy Status": "ON_RISK",
            "Due Date of 1st Arrear": "01/01/2024",
            "Due Date of 2nd Arrear": "01/02/2024",
            "Due Date of 3rd Arrear": "01/03/2024",
            "Max. Next Premium Collection Date": "01/05/2024",
        },
        {"Policy Number": "   ", "Policy Status": "ON_RISK"},
    ]


@pytest.fixture
def dashboard_text(dashboard_rows: list[dict[str, str]]) -> str:
    return dashboard_csv(dashboard_rows)


@pytest.fixture
def dashboard_headers() -> list[str]:
    return list(DASHBOARD_HEADERS)


@pytest.fixture
def make_dashboard():
    return dashboard_csv
