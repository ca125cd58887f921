import pytest

from policyrecovery.errors import MissingColumnsError
from policyrecovery.extractor import (
    extract_policy_record,
    extract_policy_records,
    potential_cancellation_date,
    validate_dashboard_headers,
)
from policyrecovery.schemas import DashboardColumns
from policyrecovery.tables import read_table



def test_record_is_normalized(dashboard_text: str) -> None:
    records = extract_policy_records(read_table(dashboard_text))
    first = records[0]
    assert first.policy_number == "POL-12"
    assert first.status == "ON_RISK"
    assert first.missed_payments == ("01/01/2024",)
    assert first.max_next_premium_collection_date == "05/03/2024"
    assert first.starting_date == "01/06/2020"
    assert first.current_gross_premium_per_frequency == "£25.00"
    assert first.cancellation_reason is None
    assert first.extra == {"Product Name": "Level Term"}
    assert first.source_row["Max. Next Premium Collection Date"] == "05/03/2024 00:00:00"


def test_rows_without_policy_number_are_skipped(dashboard_text: str) -> None:
    records = extract_policy_records(read_table(dashboard_text))
    assert [r.policy_number for r in records] == ["POL-12", "POL-2", "POL-7", "POL-9", "POL-30"]


def test_missing_mandatory_columns_are_all_listed() -> None:
    with pytest.raises(MissingColumnsError) as excinfo:
        validate_dashboard_headers(["Policy Number", "Due Date of 1st Arrear"])
    assert excinfo.value.missing == [
        "Policy Status",
        "Due Date of 2nd Arrear",
        "Due Date of 3rd Arrear",
    ]
    assert "Policy Status" in str(excinfo.value)


def test_missing_column_fails_before_rows_are_read() -> None:
    table = read_table("Policy Number,Policy Status\nPOL-1,ON_RISK\n")
    with pytest.raises(MissingColumnsError):
        extract_policy_records(table)


def test_missed_payments_keep_column_order_and_drop_blanks(dashboard_headers: list[str]) -> None:
    headers = dashboard_headers[:5]
    row = {
        "Policy Number": " POL-1 ",
        "Policy Status": "",
        "Due Date of 1st Arrear": "01/03/2024",
        "Due Date of 2nd Arrear": "   ",
        "Due Date of 3rd Arrear": "01/01/2024",
    }
    record = extract_policy_record(row, headers)
    assert record is not None
    assert record.policy_number == "POL-1"
    assert record.status == "UNKNOWN"
    assert record.missed_payments == ("01/03/2024", "01/01/2024")


def test_optional_columns_absent_from_file_stay_unset(dashboard_headers: list[str]) -> None:
    headers = dashboard_headers[:5]
    row = {h: "" for h in headers} | {
        "Policy Number": "POL-1",
        # Stray key with no matching header in the file.
        "Cancellation Reason": "Customer request",
    }
    record = extract_policy_record(row, headers)
    assert record is not None
    assert record.cancellation_reason is None
    assert record.extra == {}


def test_potential_cancellation_date_for_on_risk_with_three_arrears(dashboard_text: str) -> None:
    records = {r.policy_number: r for r in extract_policy_records(read_table(dashboard_text))}
    assert records["POL-30"].potential_cancellation_date == "31/03/2024"
    assert records["POL-12"].potential_cancellation_date is None


@pytest.mark.parametrize(
    ("status", "missed", "expected"),
    [
        ("ON RISK", ("01/01/2024", "01/02/2024", "15/02/2024"), "16/03/2024"),
        ("LAPSED", ("01/01/2024", "01/02/2024", "01/03/2024"), None),
        ("ON_RISK", ("01/01/2024", "01/02/2024"), None),
        ("ON_RISK", ("01/01/2024", "01/02/2024", "31/02/2024"), None),
        ("ON_RISK", ("01/01/2024", "01/02/2024", "0\u00b2/03/2024"), None),
    ],
)
def test_potential_cancellation_date_rules(
    status: str, missed: tuple[str, ...], expected: str | None
) -> None:
    assert potential_cancellation_date(status, missed) == expected


def test_alternate_header_set() -> None:
    columns = DashboardColumns(
        policy_number="Policy No",
        status="Status",
        first_arrear="Arrear 1",
        second_arrear="Arrear 2",
        third_arrear="Arrear 3",
        next_premium_collection_date="Next Collection",
    )
    table = read_table(
        "Policy No,Status,Arrear 1,Arrear 2,Arrear 3,Next Collection,Policy Number\n"
        "AB-5,ON_RISK,01/01/2024,,,05/03/2024 09:00,legacy\n"
    )
    (record,) = extract_policy_records(table, columns=columns)
    assert record.policy_number == "AB-5"
    assert record.max_next_premium_collection_date == "05/03/2024"
    assert record.extra == {"Policy Number": "legacy"}
